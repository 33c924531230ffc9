"""
Callbacks de la pasarela de pago.

- success / fail / cancel: redirect del navegador del huésped (GET o POST form).
- ipn: notificación servidor a servidor; el resultado sale del campo `status`.
- demo-checkout: página de pago simulada, solo en modo demo/mock.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.api.dependencies import get_use_cases
from app.api.schemas.billing import GatewayCallbackResponse
from app.domain.entities.payment import GatewayOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments/gateway")


async def _callback_payload(request: Request) -> dict[str, Any]:
    payload: dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        payload.update({key: value for key, value in form.items() if isinstance(value, str)})
    return payload


async def _apply(outcome: GatewayOutcome, request: Request, use_cases) -> GatewayCallbackResponse:
    payload = await _callback_payload(request)
    payment = await use_cases["gateway_callback"].execute(outcome=outcome, payload=payload)
    return GatewayCallbackResponse.from_entity(payment)


@router.api_route("/success", methods=["GET", "POST"], response_model=GatewayCallbackResponse)
async def gateway_success(request: Request, use_cases=Depends(get_use_cases)) -> GatewayCallbackResponse:
    return await _apply(GatewayOutcome.SUCCESS, request, use_cases)


@router.api_route("/fail", methods=["GET", "POST"], response_model=GatewayCallbackResponse)
async def gateway_fail(request: Request, use_cases=Depends(get_use_cases)) -> GatewayCallbackResponse:
    return await _apply(GatewayOutcome.FAIL, request, use_cases)


@router.api_route("/cancel", methods=["GET", "POST"], response_model=GatewayCallbackResponse)
async def gateway_cancel(request: Request, use_cases=Depends(get_use_cases)) -> GatewayCallbackResponse:
    return await _apply(GatewayOutcome.CANCEL, request, use_cases)


@router.post("/ipn", response_model=GatewayCallbackResponse)
async def gateway_ipn(request: Request, use_cases=Depends(get_use_cases)) -> GatewayCallbackResponse:
    payload = await _callback_payload(request)
    payment = await use_cases["gateway_callback"].handle_ipn(payload)
    return GatewayCallbackResponse.from_entity(payment)


@router.get("/demo-checkout", response_model=GatewayCallbackResponse)
async def demo_checkout(
    tran_id: str = Query(...),
    outcome: GatewayOutcome = Query(default=GatewayOutcome.SUCCESS),
    use_cases=Depends(get_use_cases),
) -> GatewayCallbackResponse:
    payment = await use_cases["gateway_callback"].demo_checkout(tran_id, outcome)
    if payment is None:
        logger.warning("Demo checkout requested while disabled", extra={"external_txn_id": tran_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return GatewayCallbackResponse.from_entity(payment)
