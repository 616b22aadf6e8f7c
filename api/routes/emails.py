"""
Email Scan API Routes

Implements the scoring endpoints used by the inbox integration.

Design Considerations:
- Analysis endpoint scores and records, score endpoint only scores
- Provider failures never fail the request; they surface as warnings
- Unexpected errors are logged and reported as 500
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from api.models.emails import EmailScanRequest, EmailScanResponse
from api.services.scanner_service import ScannerService, get_scanner_service

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix
router = APIRouter(prefix="/emails", tags=["Email Scanning"])


@router.post(
    "/analyze",
    response_model=EmailScanResponse,
    summary="Score an email and record the scan"
)
async def analyze_email(
    request: EmailScanRequest,
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Score an email for phishing and malicious links.

    The scan is added to the dashboard counters and history, and a
    threat triggers a notification when notifications are enabled.

    Args:
        request: Email fields and optional scan toggles

    Returns:
        Trust score, warnings and threat flag
    """
    settings = _resolve_settings(request, scanner)
    try:
        result = await scanner.analyze(request.to_message(), settings)
        return EmailScanResponse.from_result(result)
    except Exception as e:
        logger.error(f"Error analyzing email: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to analyze email: {str(e)}"
        )


@router.post(
    "/score",
    response_model=EmailScanResponse,
    summary="Score an email without recording it"
)
async def score_email(
    request: EmailScanRequest,
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Score an email without touching statistics or history.

    Args:
        request: Email fields and optional scan toggles

    Returns:
        Trust score, warnings and threat flag
    """
    settings = _resolve_settings(request, scanner)
    try:
        result = await scanner.score(request.to_message(), settings)
        return EmailScanResponse.from_result(result)
    except Exception as e:
        logger.error(f"Error scoring email: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to score email: {str(e)}"
        )


def _resolve_settings(request: EmailScanRequest, scanner: ScannerService):
    if request.settings is None:
        return scanner.default_settings
    return request.settings.merge_into(scanner.default_settings)
