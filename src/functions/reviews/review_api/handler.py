from review_store.cors import ALLOWED_METHODS
from review_store.decorators import get_method, lambda_wrapper, with_cors
from review_store.responses import created, method_not_allowed, no_content, success
from review_api.interface import (
    ListReviewsRequest,
    ModerateReviewRequest,
    SubmitReviewRequest,
)
from review_api.service import list_reviews, moderate_review, submit_review


@lambda_wrapper(model=ListReviewsRequest)
def list_reviews_handler(request: ListReviewsRequest, context):
    return success(list_reviews(request.status))


@lambda_wrapper(model=SubmitReviewRequest)
def submit_review_handler(request: SubmitReviewRequest, context):
    review = submit_review(request)
    return created({"ok": True, "id": review.id})


@lambda_wrapper(model=ModerateReviewRequest, require_admin=True)
def moderate_review_handler(request: ModerateReviewRequest, context):
    moderate_review(request)
    return success({"ok": True})


ROUTES = {
    "GET": list_reviews_handler,
    "POST": submit_review_handler,
    "PATCH": moderate_review_handler,
}


@with_cors
def lambda_handler(event, context):
    method = get_method(event)
    if method == "OPTIONS":
        return no_content()

    route = ROUTES.get(method)
    if route is None:
        return method_not_allowed(ALLOWED_METHODS)
    return route(event, context)
