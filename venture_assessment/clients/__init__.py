"""Remote analysis provider clients.

One client per provider, all sharing the transport, timeout, retry and
validation behavior of RemoteAnalysisClient.
"""

from venture_assessment.clients.base_client import RemoteAnalysisClient
from venture_assessment.clients.company_client import CompanyClient
from venture_assessment.clients.competitive_client import CompetitiveClient
from venture_assessment.clients.market_client import MarketClient, MarketInput

__all__ = [
    "RemoteAnalysisClient",
    "CompanyClient",
    "CompetitiveClient",
    "MarketClient",
    "MarketInput",
]
