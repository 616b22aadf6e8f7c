"""
Trusted Contact API Routes

Manages the senders exempt from scanning when contact scanning is on.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from api.models.contacts import TrustedContactRequest, TrustedContactsResponse
from api.services.scanner_service import ScannerService, get_scanner_service

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix
router = APIRouter(prefix="/contacts", tags=["Trusted Contacts"])


def _contacts_response(scanner: ScannerService) -> TrustedContactsResponse:
    return TrustedContactsResponse(contacts=list(scanner.trusted_contacts))


@router.get(
    "/trusted",
    response_model=TrustedContactsResponse,
    summary="List trusted contacts"
)
async def list_trusted_contacts(
    scanner: ScannerService = Depends(get_scanner_service)
):
    return _contacts_response(scanner)


@router.post(
    "/trusted",
    response_model=TrustedContactsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a trusted contact"
)
async def add_trusted_contact(
    request: TrustedContactRequest,
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Add a sender to the trusted contacts.

    Adding an address that is already trusted is not an error.
    """
    scanner.trusted_contacts.add(request.address)
    return _contacts_response(scanner)


@router.delete(
    "/trusted/{address}",
    response_model=TrustedContactsResponse,
    summary="Remove a trusted contact"
)
async def remove_trusted_contact(
    address: str,
    scanner: ScannerService = Depends(get_scanner_service)
):
    """
    Remove a sender from the trusted contacts.

    Raises:
        HTTPException: 404 if the address is not trusted
    """
    if not scanner.trusted_contacts.remove(address):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Contact not found: {address}"
        )
    return _contacts_response(scanner)
