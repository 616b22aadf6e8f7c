"""
Dashboard API Routes

Implements the read-only statistics and history endpoints behind the
popup dashboard.

Design Considerations:
- Reads never modify counters or history
- Invalid filters are rejected before reaching storage
- Storage failures are rendered by the storage error handler
- Clear endpoint documentation
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.models.dashboard import DashboardStats, HistoryItem, HistoryResponse
from api.services.scanner_service import ScannerService, get_scanner_service
from secure_inbox.storage.secure import StorageError

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix
router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Get scan statistics"
)
async def get_dashboard_stats(
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Retrieve the aggregate scan counters.

    Returns:
        Emails scanned, threats blocked and last scan time
    """
    try:
        stats = await scanner.get_stats()
        return DashboardStats.from_stats(stats)
    except StorageError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving dashboard stats: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve dashboard statistics: {str(e)}"
        )


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Get scan history"
)
async def get_scan_history(
    search: str = Query("", description="Text matched against sender, subject and snippet"),
    status_filter: str = Query(
        "all",
        alias="status",
        pattern="^(all|threats|safe)$",
        description="History filter (all, threats, safe)"
    ),
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Retrieve recorded scans, most recent first.

    Args:
        search: Case-insensitive search text
        status_filter: Restrict to threats or safe scans

    Returns:
        Matching history entries and their count
    """
    try:
        entries = await scanner.get_history(search=search, status=status_filter)
        items = [HistoryItem.from_entry(entry) for entry in entries]
        return HistoryResponse(entries=items, total=len(items))
    except StorageError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving scan history: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve scan history: {str(e)}"
        )


@router.get(
    "/threats/recent",
    response_model=List[HistoryItem],
    summary="Get recent threats"
)
async def get_recent_threats(
    limit: int = Query(5, ge=1, le=100, description="Maximum number of threats returned"),
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Retrieve the most recent scans that flagged a threat.

    Args:
        limit: Maximum number of entries

    Returns:
        Threat history entries, most recent first
    """
    try:
        threats = await scanner.get_recent_threats(limit)
        return [HistoryItem.from_entry(entry) for entry in threats]
    except StorageError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving recent threats: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve recent threats: {str(e)}"
        )
