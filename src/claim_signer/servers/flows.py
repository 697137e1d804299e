"""
Built-in event handlers for the claim signing workflow.

Implements the core flow: request validation → purchase verification and
domain resolution → tier resolution → candidate signing.
"""

import asyncio
import logging
from typing import Optional

from ..adapters.evm.domains import resolve_domain
from ..adapters.evm.schemas import ClaimValue, PurchaseEvent
from ..adapters.evm.signatures import compute_order_hash, sign_claim_candidates
from ..adapters.evm.verifies import verify_purchase
from ..claims.requests import validate_claim_request
from ..claims.tiers import resolve_tier
from ..engine.events import (
    EventBus,
    Dependencies,
    ClaimRequestEvent,
    ClaimAuthorizedEvent,
    CandidatesSignedEvent,
    ClaimRejectedEvent,
)
from ..engine.exceptions import ClaimSignerError


logger = logging.getLogger(__name__)


def _rejected(error: ClaimSignerError) -> ClaimRejectedEvent:
    logger.warning("Claim rejected: %s (%s)", error.error_code, error.detail)
    return ClaimRejectedEvent(
        error_code=error.error_code,
        payload=error.to_payload(),
        status_code=error.status_code,
    )


# ==================== Event Handlers ====================

async def handle_claim_request(
    event: ClaimRequestEvent,
    deps: Dependencies
) -> ClaimAuthorizedEvent | ClaimRejectedEvent:
    """Validate the request, verify the purchase and resolve the domain."""
    settings = deps.settings
    try:
        request = validate_claim_request(event.request)

        async def verification() -> Optional[PurchaseEvent]:
            if not request.transaction_hash:
                return None
            return await verify_purchase(
                deps.chain_reader,
                tx_hash=request.transaction_hash,
                expected_buyer=request.recipient_address,
                store_address=settings.store_address,
            )

        results = await asyncio.gather(
            verification(),
            resolve_domain(
                deps.chain_reader,
                contract_address=settings.contract_address,
                domain_name=settings.domain_name,
                domain_version=settings.domain_version,
                default_token_name=settings.default_token_name,
            ),
            return_exceptions=True,
        )
        # Verification failures take precedence over domain failures.
        for result in results:
            if isinstance(result, BaseException):
                raise result
        purchase, domain = results

        if purchase is not None:
            tier = resolve_tier(
                request.tier_hint,
                purchase.sku_id,
                tier_offset=settings.tier_offset,
                min_tier=settings.min_tier,
            )
            # The purchase transaction is the unique order reference.
            order_id = request.transaction_hash
        else:
            tier = request.tier_hint
            order_id = request.order_id

        claim = ClaimValue(
            recipient_address=request.recipient_address,
            tier=tier,
            order_hash=compute_order_hash(order_id),
            token_uri=request.token_uri,
        )
    except ClaimSignerError as e:
        return _rejected(e)

    return ClaimAuthorizedEvent(claim=claim, domain=domain, purchase=purchase)


async def handle_claim_authorized(
    event: ClaimAuthorizedEvent,
    deps: Dependencies
) -> CandidatesSignedEvent | ClaimRejectedEvent:
    """Sign every candidate domain version and layout."""
    try:
        candidates = sign_claim_candidates(
            private_key=deps.settings.signer_private_key,
            claim=event.claim,
            domain=event.domain,
        )
    except ClaimSignerError as e:
        return _rejected(e)

    logger.info(
        "Issued %d claim candidates (tier=%d, chainId=%d)",
        len(candidates), event.claim.tier, event.domain.chain_id,
    )
    return CandidatesSignedEvent(
        candidates=candidates,
        domain=event.domain,
        purchase=event.purchase,
    )


# ==================== Event Bus Setup ====================

def setup_event_bus() -> EventBus:
    """Initialize event bus with built-in handlers."""
    event_bus = EventBus()

    event_bus.subscribe(ClaimRequestEvent, handle_claim_request)
    event_bus.subscribe(ClaimAuthorizedEvent, handle_claim_authorized)

    return event_bus
