# src/captionguard/web/routes.py
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile

from captionguard.agents import ComplianceReviewer, HashtagSelector
from captionguard.clients import DifyClient
from captionguard.config import CaptionGuardConfig
from captionguard.core.env import get_settings
from captionguard.core.errors import CaptionGuardError
from captionguard.core.logging import get_logger
from captionguard.models.caption import CaptionInputs, ReferenceFile, ReviseRequest
from captionguard.orchestrator import CaptionWorkflow

logger = get_logger(__name__)

# Create the router
router = APIRouter()


def get_reviewer(settings: CaptionGuardConfig = Depends(get_settings)) -> ComplianceReviewer:
    return ComplianceReviewer(settings=settings)


def get_selector(settings: CaptionGuardConfig = Depends(get_settings)) -> HashtagSelector:
    return HashtagSelector(settings=settings)


def get_dify_client(settings: CaptionGuardConfig = Depends(get_settings)) -> DifyClient:
    return DifyClient(settings)


def get_workflow(
    client: DifyClient = Depends(get_dify_client),
    reviewer: ComplianceReviewer = Depends(get_reviewer),
    selector: HashtagSelector = Depends(get_selector),
) -> CaptionWorkflow:
    return CaptionWorkflow(client=client, reviewer=reviewer, selector=selector)


def _require_caption(payload: Any) -> str:
    caption = payload.get("caption") if isinstance(payload, dict) else None
    if not caption or not isinstance(caption, str):
        raise HTTPException(status_code=400, detail="Caption is required")
    return caption


def _require_api_key(settings: CaptionGuardConfig) -> None:
    if not settings.llm.api_key:
        raise HTTPException(status_code=500, detail="OpenAI API key is not configured")


@router.post("/api/review")
async def review_caption(
    payload: Any = Body(None), reviewer: ComplianceReviewer = Depends(get_reviewer)
):
    """Review a caption for 薬機法 risk expressions."""
    _require_api_key(reviewer.settings)
    caption = _require_caption(payload)
    try:
        result = await reviewer.review(caption)
    except CaptionGuardError:
        raise
    except Exception as e:
        logger.error(f"Error in review_caption: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return result.model_dump(by_alias=True)


@router.post("/api/hashtags")
async def select_hashtags(
    payload: Any = Body(None), selector: HashtagSelector = Depends(get_selector)
):
    """Fixed hashtags plus the ones chosen for the caption."""
    _require_api_key(selector.settings)
    caption = _require_caption(payload)
    try:
        result = await selector.select(caption)
    except CaptionGuardError:
        raise
    except Exception as e:
        logger.error(f"Error in select_hashtags: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return result.model_dump(by_alias=True)


@router.post("/api/captions")
async def create_caption(
    planning_proposal: str = Form(""),
    planning_intent: str = Form(""),
    ref_url1: str = Form(""),
    ref_url2: str = Form(""),
    ref_url3: str = Form(""),
    files: list[UploadFile] | None = File(None),
    workflow: CaptionWorkflow = Depends(get_workflow),
):
    """Draft a caption, then review it and pick hashtags."""
    inputs = CaptionInputs(
        planning_proposal=planning_proposal,
        planning_intent=planning_intent,
        ref_url1=ref_url1,
        ref_url2=ref_url2,
        ref_url3=ref_url3,
    )
    references = [
        ReferenceFile(
            filename=upload.filename or "upload",
            content=await upload.read(),
            content_type=upload.content_type or "application/octet-stream",
        )
        for upload in files or []
    ]
    result = await workflow.create(inputs, references)
    return result.model_dump(by_alias=True)


@router.post("/api/captions/revise")
async def revise_caption(
    request: ReviseRequest, workflow: CaptionWorkflow = Depends(get_workflow)
):
    """Apply an edit instruction to an existing caption."""
    answer = await workflow.revise(request.query, request.conversation_id, request.inputs)
    return answer.model_dump(by_alias=True)
