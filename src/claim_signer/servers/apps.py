"""
Claim Signing Server - Event-driven FastAPI wrapper.

Exposes a single CORS-enabled endpoint that verifies a purchase and returns
EIP-712 claim signature candidates, plus a liveness route.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..adapters.bases import ChainReader
from ..adapters.evm.reader import Web3ChainReader
from ..claims.requests import parse_claim_request
from ..config import ClaimSignerSettings, cors_origin_from_env
from ..engine.events import (
    BaseEvent,
    CandidatesSignedEvent,
    ClaimRejectedEvent,
    ClaimRequestEvent,
    Dependencies,
    EventBus,
)
from ..engine.exceptions import ClaimSignerError, MethodNotAllowed, UnhandledError
from ..engine.executors import EventChain
from ..schemas.https import ClaimCandidatesResponse, ClaimRequest, ClaimSignatureResponse
from .flows import setup_event_bus


logger = logging.getLogger(__name__)

ALLOWED_METHODS = "POST, OPTIONS"

#: Every method reaches the claim handler, which answers 405 itself.
_ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def with_cors(body: Dict[str, Any], status_code: int = 200, allow_origin: str = "*") -> JSONResponse:
    """Wrap ``body`` in a JSON response carrying the CORS headers."""
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
        },
    )


def default_chain_reader(settings: ClaimSignerSettings) -> ChainReader:
    return Web3ChainReader(rpc_url=settings.rpc_url)


class ClaimSignerServer(FastAPI):
    """FastAPI server issuing EIP-712 claim signatures for verified purchases."""

    def __init__(
        self,
        settings_loader: Optional[Callable[[], ClaimSignerSettings]] = None,
        chain_reader_factory: Optional[Callable[[ClaimSignerSettings], ChainReader]] = None,
        claim_endpoint: str = "/sign-claim",
        **fastapi_kwargs
    ):
        """Initialize claim signing server.

        Args:
            settings_loader: Returns fresh settings for each request
                             (default: ``ClaimSignerSettings.from_env``).
            chain_reader_factory: Builds the chain reader from the settings
                                  (default: ``Web3ChainReader`` on RPC_URL).
            claim_endpoint: Claim endpoint path (default: /sign-claim)
            **fastapi_kwargs: FastAPI arguments (title, version, etc.)
        """
        self.settings_loader = settings_loader or ClaimSignerSettings.from_env
        self.chain_reader_factory = chain_reader_factory or default_chain_reader
        self.event_bus: EventBus = setup_event_bus()

        super().__init__(**fastapi_kwargs)

        self.claim_endpoint = claim_endpoint
        self._setup_claim_endpoint(claim_endpoint)
        self._setup_health_endpoint()

    def subscribe(self, event_class: type[BaseEvent], handler: Callable) -> None:
        """Register event handler.

        Args:
            event_class: Event type to handle
            handler: Async function(event, deps) -> Optional[BaseEvent]
        """
        self.event_bus.subscribe(event_class, handler)

    def add_hook(self, event_class: type[BaseEvent], hook: Callable) -> None:
        """Register event hook for side effects.

        Args:
            event_class: Event type to hook into
            hook: Async function(event, deps) -> None

        Example:
            ```python
            async def audit(event, deps):
                logger.info("Signed %d candidates", len(event.candidates))

            app.add_hook(CandidatesSignedEvent, audit)
            ```
        """
        self.event_bus.hook(event_class, hook)

    def hook(self, event_class: type[BaseEvent]) -> Callable:
        """Decorator for registering event hooks.

        Example:
            @app.hook(ClaimRejectedEvent)
            async def on_rejected(event, deps):
                await alert(event.error_code)
        """
        def decorator(hook_func: Callable) -> Callable:
            self.event_bus.hook(event_class, hook_func)
            return hook_func
        return decorator

    def _load_settings(self) -> Tuple[Optional[ClaimSignerSettings], Optional[ClaimSignerError]]:
        """Load settings once for a request, returning the failure instead of raising."""
        try:
            return self.settings_loader(), None
        except ClaimSignerError as e:
            return None, e
        except Exception:
            logger.exception("Unhandled error while loading settings")
            return None, UnhandledError("Unexpected error while processing the claim")

    async def sign_claim(
        self,
        body: Optional[bytes],
        settings: Optional[ClaimSignerSettings] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Run the full claim flow for a raw POST body.

        Args:
            body: Raw request body.
            settings: Settings already loaded for this request; loaded
                      through ``settings_loader`` when omitted.

        Returns:
            (status_code, JSON body). Never raises: every failure is rendered
            as an error body.
        """
        try:
            if settings is None:
                settings = self.settings_loader()
            settings = settings.require()
            claim_request = parse_claim_request(body)
            deps = Dependencies(
                settings=settings,
                chain_reader=self.chain_reader_factory(settings),
            )
            return await self._run_claim_flow(claim_request, deps)
        except ClaimSignerError as e:
            return e.status_code, e.to_payload()
        except Exception:
            logger.exception("Unhandled error while signing claim")
            error = UnhandledError("Unexpected error while processing the claim")
            return error.status_code, error.to_payload()

    async def _run_claim_flow(
        self,
        claim_request: ClaimRequest,
        deps: Dependencies,
    ) -> Tuple[int, Dict[str, Any]]:
        event_chain = EventChain(self.event_bus, deps)

        outcome: Optional[BaseEvent] = None
        async for event in event_chain.execute(ClaimRequestEvent(request=claim_request)):
            if isinstance(event, (CandidatesSignedEvent, ClaimRejectedEvent)):
                outcome = event

        if isinstance(outcome, ClaimRejectedEvent):
            return outcome.status_code, outcome.payload
        if isinstance(outcome, CandidatesSignedEvent):
            return 200, self._render_signed(outcome, deps.settings)
        raise UnhandledError("Claim flow finished without a result")

    @staticmethod
    def _render_signed(event: CandidatesSignedEvent, settings: ClaimSignerSettings) -> Dict[str, Any]:
        buyer = event.purchase.buyer_address if event.purchase else None
        sku_id = event.purchase.sku_id if event.purchase else None

        if settings.response_mode == "single":
            first = event.candidates[0]
            return ClaimSignatureResponse(
                **first.model_dump(),
                token_name=event.domain.token_name,
                buyer=buyer,
                sku_id=sku_id,
            ).to_dict()

        return ClaimCandidatesResponse(
            candidates=event.candidates,
            buyer=buyer,
            sku_id=sku_id,
        ).to_dict()

    def _setup_claim_endpoint(self, path: str = "/sign-claim") -> None:
        """
        Setup claim endpoint.

        Args:
            path: Endpoint path (default: /sign-claim)
        """
        @self.api_route(path, methods=_ROUTED_METHODS)
        async def claim_signer(request: Request):
            """Verify the purchase and return claim signature candidates."""
            settings, load_error = self._load_settings()
            allow_origin = settings.allow_origin if settings is not None else cors_origin_from_env()

            if request.method == "OPTIONS":
                return with_cors({"ok": True}, 200, allow_origin)

            if request.method != "POST":
                error = MethodNotAllowed("Method not allowed")
                return with_cors(error.to_payload(), error.status_code, allow_origin)

            if load_error is not None:
                return with_cors(load_error.to_payload(), load_error.status_code, allow_origin)

            status_code, content = await self.sign_claim(await request.body(), settings=settings)
            return with_cors(content, status_code, allow_origin)

    def _setup_health_endpoint(self) -> None:
        @self.get("/health")
        async def health() -> Dict[str, str]:
            return {"status": "ok"}
