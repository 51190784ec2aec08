"""
Publication gateway selection.
"""
from marketing_cms.services.integrations.base import PublicationGateway
from marketing_cms.services.integrations.logging_gateway import LoggingPublicationGateway
from marketing_cms.services.integrations.twitter import build_twitter_gateway


def build_publication_gateway(publisher: str) -> PublicationGateway:
    """Select the gateway named by the PUBLISHER setting."""
    if publisher == "log":
        return LoggingPublicationGateway()
    if publisher == "twitter":
        return build_twitter_gateway()
    raise ValueError(f"Unknown publisher '{publisher}'")
