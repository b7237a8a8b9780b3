"""Market bounded context — product listings, moderation and engagement.

Sellers submit listings that stay hidden until a moderator approves them.
Buyers and other users engage with listings through comments, up/down
reactions and purchase records, each tracked on the Product aggregate.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

market = Domain(name="market")
