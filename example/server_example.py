import logging

from claim_signer import ClaimSignerServer, ClaimSignerSettings, setup_logging
from claim_signer.engine.events import CandidatesSignedEvent, ClaimRejectedEvent


# Reads SIGNER_PK, CONTRACT_ADDR, RPC_URL, STORE_ADDR, ... from ./.env if present
settings = ClaimSignerSettings.from_env(env_file=".env")
setup_logging(level=settings.log_level)

logger = logging.getLogger("claim_signer.example")

# ✨ Initialize app - claim endpoint is automatically added at /sign-claim
app = ClaimSignerServer(title="NFT Claim Signer")


# Optional: Add event hooks for custom logic
@app.hook(CandidatesSignedEvent)
async def on_candidates_signed(event, deps):
    """Log every issued claim."""
    first = event.candidates[0]
    logger.info(
        "✅ Claim signed for %s: tier=%d, %d candidates",
        event.purchase.buyer_address if event.purchase else "off-chain order",
        first.tier,
        len(event.candidates),
    )


@app.hook(ClaimRejectedEvent)
async def on_claim_rejected(event, deps):
    """Log rejected claims."""
    logger.warning("❌ Claim rejected: %s", event.payload)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="localhost", port=8000, log_level=settings.log_level.lower())
