"""FastAPI routes for the Market bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands or read functions (internal domain concepts). The caller's
identity is resolved upstream and arrives through ``current_requester``.
"""

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from market.api.schemas import (
    AddCommentRequest,
    AddReactionRequest,
    CommentIdResponse,
    CommentSchema,
    ProductIdResponse,
    ProductResponse,
    RecordPurchaseRequest,
    StatusResponse,
    SubmitProductRequest,
    VerificationResponse,
)
from market.product import queries
from market.product.comments import AddComment, RemoveComment
from market.product.moderation import ApproveProduct
from market.product.purchases import RecordPurchase, RemoveBuyer
from market.product.reactions import AddProductReaction, RemoveProductReaction
from market.product.removal import DeleteProduct
from market.product.submission import SubmitProduct
from shared.api import Requester, current_requester

market_router = APIRouter(prefix="/market", tags=["market"])

_VERIFIERS = {
    "reaction": queries.verify_reaction,
    "purchase": queries.verify_purchase,
    "comment": queries.verify_comment,
}


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        seller_id=str(product.seller_id),
        market_id=product.market_id,
        title=product.title,
        description=product.description,
        price=product.price,
        currency=product.currency,
        photos=list(product.photos or []),
        status=product.status,
        upvotes=product.upvotes,
        downvotes=product.downvotes,
        buyer_count=len(product.buyers),
        comments=[
            CommentSchema(
                comment_id=str(c.id),
                author_id=str(c.author_id),
                body=c.body,
                created_at=c.created_at,
            )
            for c in product.comments
        ],
        created_at=product.created_at,
        approved_at=product.approved_at,
    )


# --- Moderation workflow ---


@market_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def submit_product(
    body: SubmitProductRequest,
    requester: Requester = Depends(current_requester),
) -> ProductIdResponse:
    command = SubmitProduct(
        requester_id=requester.user_id,
        requester_rank=requester.rank.value,
        market_id=body.market_id,
        title=body.title,
        description=body.description,
        price=body.price,
        currency=body.currency,
        photos=body.photos or [],
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@market_router.get("/products/pending", response_model=list[ProductResponse])
async def pending_products(requester: Requester = Depends(current_requester)) -> list[ProductResponse]:
    return [_product_response(p) for p in queries.list_pending(requester.rank)]


@market_router.put("/products/{product_id}/approve", response_model=StatusResponse)
async def approve_product(
    product_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = ApproveProduct(
        product_id=product_id,
        moderator_id=requester.user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@market_router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    requester: Requester = Depends(current_requester),
) -> ProductResponse:
    product = queries.get_product(product_id, requester.user_id, requester.rank)
    return _product_response(product)


@market_router.get("/{market_id}/products", response_model=list[ProductResponse])
async def list_products(
    market_id: int,
    page: int = Query(default=0, ge=0),
    requester: Requester = Depends(current_requester),
) -> list[ProductResponse]:
    products = queries.list_products(market_id, page, requester.user_id, requester.rank)
    return [_product_response(p) for p in products]


@market_router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(
    product_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = DeleteProduct(
        product_id=product_id,
        requester_id=requester.user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- Engagement ---


@market_router.get("/products/{product_id}/verify/{kind}", response_model=VerificationResponse)
async def verify_engagement(
    product_id: str,
    kind: str,
    user_id: str | None = Query(default=None),
    requester: Requester = Depends(current_requester),
) -> VerificationResponse:
    verifier = _VERIFIERS.get(kind)
    if verifier is None:
        raise ValidationError({"kind": [f"Unknown verification '{kind}'"]})
    verified = verifier(product_id, user_id or requester.user_id, requester.user_id, requester.rank)
    return VerificationResponse(verified=verified)


@market_router.post("/products/{product_id}/comments", status_code=201, response_model=CommentIdResponse)
async def add_comment(
    product_id: str,
    body: AddCommentRequest,
    requester: Requester = Depends(current_requester),
) -> CommentIdResponse:
    command = AddComment(
        product_id=product_id,
        author_id=requester.user_id,
        author_rank=requester.rank.value,
        body=body.body,
    )
    comment_id = current_domain.process(command, asynchronous=False)
    return CommentIdResponse(comment_id=comment_id)


@market_router.delete("/products/{product_id}/comments/{comment_id}", response_model=StatusResponse)
async def remove_comment(
    product_id: str,
    comment_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = RemoveComment(
        product_id=product_id,
        comment_id=comment_id,
        requester_id=requester.user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@market_router.post("/products/{product_id}/reactions", status_code=201, response_model=StatusResponse)
async def add_reaction(
    product_id: str,
    body: AddReactionRequest,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = AddProductReaction(
        product_id=product_id,
        author_id=requester.user_id,
        author_rank=requester.rank.value,
        polarity=body.polarity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@market_router.delete("/products/{product_id}/reactions/{author_id}", response_model=StatusResponse)
async def remove_reaction(
    product_id: str,
    author_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = RemoveProductReaction(
        product_id=product_id,
        author_id=author_id,
        requester_id=requester.user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@market_router.post("/products/{product_id}/buyers", status_code=201, response_model=StatusResponse)
async def record_purchase(product_id: str, body: RecordPurchaseRequest) -> StatusResponse:
    command = RecordPurchase(product_id=product_id, user_id=body.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@market_router.delete("/products/{product_id}/buyers/{user_id}", response_model=StatusResponse)
async def remove_buyer(
    product_id: str,
    user_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = RemoveBuyer(
        product_id=product_id,
        user_id=user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
