"""Authorization callback routes.

Discourse redirects the user here with the encrypted user API key in the
``payload`` query parameter once they authorize the application.
"""

import logging

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse

from joingate.application.messages import Messages
from joingate.application.usecase.join import CompleteVerificationUseCase
from joingate.application.usecase.join.complete_verification import (
    CompleteVerificationRequest,
)
from joingate.config import Settings
from joingate.domain.value import FailureReason, ResponseTransport
from joingate.interface.api.pages import render_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

FAILURE_STATUS: dict[FailureReason, int] = {
    FailureReason.MALFORMED_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    FailureReason.DECRYPTION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    FailureReason.EXPIRED_OR_UNKNOWN_NONCE: status.HTTP_403_FORBIDDEN,
    FailureReason.NONCE_MISMATCH: status.HTTP_403_FORBIDDEN,
    FailureReason.VERIFICATION_FAILED: status.HTTP_403_FORBIDDEN,
    FailureReason.APPROVAL_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.get("", response_class=HTMLResponse)
@router.get("/{hint}", response_class=HTMLResponse)
async def auth_callback(
    complete_verification: FromDishka[CompleteVerificationUseCase],
    messages: FromDishka[Messages],
    settings: FromDishka[Settings],
    payload: str | None = None,
    hint: str | None = None,
) -> HTMLResponse:
    """Handle the Discourse redirect carrying an encrypted payload.

    Args:
        complete_verification: Complete verification use case from DI
        messages: Message catalog from DI
        settings: Application settings from DI
        payload: Base64 encoded encrypted user API key
        hint: Ignored path segment, kept for redirect URLs with a suffix

    Returns:
        HTML result page
    """
    if not payload:
        return _failure_page(
            messages, messages.text("missing_payload"), status.HTTP_400_BAD_REQUEST
        )

    try:
        result = await complete_verification.execute(
            CompleteVerificationRequest(
                payload=payload, transport=ResponseTransport.HTTP
            )
        )
    except Exception as e:
        logger.exception("Unexpected error while handling auth callback")
        logfire.error("Auth callback failed", error_type=type(e).__name__)
        debug = {"error": f"{type(e).__name__}: {e}"} if settings.debug else None
        return _failure_page(
            messages,
            messages.text("internal_error"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            debug=debug,
        )

    decision = result.decision
    if decision.approved:
        return HTMLResponse(
            render_page(
                messages.text("page_success_title"),
                f"{result.message} {messages.text('page_success_body')}",
                success=True,
                lang=messages.locale,
                debug_title=messages.text("page_debug"),
                debug=result.debug,
            ),
            status_code=status.HTTP_200_OK,
        )

    return _failure_page(
        messages,
        result.message,
        FAILURE_STATUS.get(decision.failure, status.HTTP_500_INTERNAL_SERVER_ERROR),
        debug=result.debug,
    )


def _failure_page(
    messages: Messages,
    message: str,
    status_code: int,
    debug: dict | None = None,
) -> HTMLResponse:
    return HTMLResponse(
        render_page(
            messages.text("page_failed_title"),
            message,
            success=False,
            lang=messages.locale,
            debug_title=messages.text("page_debug"),
            debug=debug,
        ),
        status_code=status_code,
    )
