import asyncio
import os
import shutil
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from zana.config import get_settings
from zana.dependencies import get_corrector, get_engine, get_gate, get_results
from zana.errors import ZanaError
from zana.models.schemas import AnalysisResult, AnalyzeRequest, AnalyzeResponse, FixRequest, FixResponse
from zana.services.correction import CorrectionPipeline
from zana.services.engine import AnalysisEngine
from zana.services.quota import QuotaGate
from zana.services.report_generator import generate_report
from zana.services.workspace import run_gated_analysis
from zana.store import ResultStore
from zana.utils.text_extractor import extract_text_from_file, is_source_file

router = APIRouter()


def to_http(e: ZanaError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


async def _analyze(content: str, is_code: bool, gate: QuotaGate, engine: AnalysisEngine,
                   results: ResultStore) -> AnalyzeResponse:
    try:
        result = await run_gated_analysis(gate, engine, content, is_code)
        remaining = gate.remaining()
    except ZanaError as e:
        raise to_http(e)
    results.put(result)
    return AnalyzeResponse(result=result, remaining=remaining)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_content(
    request: AnalyzeRequest,
    gate: QuotaGate = Depends(get_gate),
    engine: AnalysisEngine = Depends(get_engine),
    results: ResultStore = Depends(get_results),
):
    """
    Run the three-signal analysis on raw text or code.
    """
    return await _analyze(request.content, request.is_code, gate, engine, results)


def _save_and_extract(file: UploadFile, upload_dir: str) -> str:
    os.makedirs(upload_dir, exist_ok=True)
    # Generate unique filename to avoid collisions
    file_location = os.path.join(upload_dir, f"{uuid.uuid4().hex}_{os.path.basename(file.filename or 'upload')}")
    with open(file_location, "wb+") as file_object:
        shutil.copyfileobj(file.file, file_object)
    try:
        return extract_text_from_file(file_location)
    finally:
        os.remove(file_location)


@router.post("/upload-file", response_model=AnalyzeResponse)
async def upload_file(
    file: UploadFile = File(...),
    is_code: Optional[bool] = Form(None),
    gate: QuotaGate = Depends(get_gate),
    engine: AnalysisEngine = Depends(get_engine),
    results: ResultStore = Depends(get_results),
):
    """
    Upload a document or source file, extract its text and analyze it.
    Source-code extensions default to code mode unless is_code is given.
    """
    upload_dir = os.path.join(get_settings().reports_dir, "uploads")
    try:
        extracted_text = await asyncio.to_thread(_save_and_extract, file, upload_dir)
    except (RuntimeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    code_mode = is_source_file(file.filename or "") if is_code is None else is_code
    return await _analyze(extracted_text, code_mode, gate, engine, results)


@router.get("/results/{result_id}", response_model=AnalysisResult)
def get_result(result_id: str, results: ResultStore = Depends(get_results)):
    try:
        return results.get(result_id)
    except ZanaError as e:
        raise to_http(e)


@router.get("/download-report/{result_id}")
def download_report(result_id: str, results: ResultStore = Depends(get_results)):
    try:
        result = results.get(result_id)
    except ZanaError as e:
        raise to_http(e)

    try:
        report_path = generate_report(result, get_settings().reports_dir)
    except (OSError, RuntimeError) as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate report: {str(e)}")
    return FileResponse(report_path, media_type='application/pdf', filename=f"forensics_report_{result_id}.pdf")


@router.post("/fix", response_model=FixResponse)
async def fix_content(request: FixRequest, corrector: CorrectionPipeline = Depends(get_corrector)):
    """
    Rewrite content so the reported quality issues are addressed.
    """
    try:
        revised = await corrector.fix(request.content, request.is_code, request.quality_issues)
    except ZanaError as e:
        raise to_http(e)
    return FixResponse(content=revised)
