"""HTTP API for claim issuance and redemption."""

from agt_claim.api.routes import build_app, client_identity

__all__ = ["build_app", "client_identity"]
