"""Shared sample texts and wire payloads for the test suite."""

HUMAN_PROSE = """I missed the bus again. Typical! So I walked, all forty minutes of it, past the bakery that still has not fixed its sign (the one that says BRAED), and by the time I got to the office my shoes were soaked through and my coffee was cold.

Nobody noticed.

My manager, bless her, asked whether I had seen the email about Thursday; I had not, and said so. She laughed."""

AI_PROSE = """Moreover, the platform delivers reliable results for every modern team. Furthermore, the system provides robust support for every modern team. Additionally, the framework ensures seamless integration for every modern team.

However, the solution offers scalable performance for every modern team. Therefore, the approach enables consistent outcomes for every modern team. Consequently, the design fosters meaningful collaboration for every modern team.

Overall, the product drives measurable value for every modern team. Ultimately, the toolkit supports efficient workflows for every modern team. Notably, the service guarantees dependable uptime for every modern team."""

CODE_SAMPLE = """def calculate_total(items):
    # Sum the price of every item
    total_price = 0
    for item in items:
        total_price += item.unit_price * item.quantity
    return total_price


def apply_discount(total_price, discount_rate):
    # Apply a percentage discount
    discounted_total = total_price * (1 - discount_rate)
    return round(discounted_total, 2)
"""


def grade_payload() -> dict:
    return {
        "primaryGrade": "B+",
        "breakdown": [{"label": "Clarity", "score": 8}, {"label": "Mechanics", "score": 7}],
        "summary": "Readable with minor issues.",
    }


def issue_payload(type_: str = "grammar") -> dict:
    return {"original": "teh", "suggestion": "the", "reason": "Typo", "type": type_}


def report_payload(**overrides) -> dict:
    payload = {
        "score": 72,
        "explanation": "Uniform rhythm.",
        "segments": [{"text": "Hello world.", "score": 0.4}],
        "aiWords": ["delve"],
        "qualityIssues": [issue_payload()],
        "grade": grade_payload(),
    }
    payload.update(overrides)
    return payload
