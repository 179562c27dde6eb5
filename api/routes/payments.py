"""Membership purchases"""

from fastapi import APIRouter, Depends, Header
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from adapters.payment_adapter import StripeGateway
from api.dependencies import assert_actor, get_caller_identity, get_payment_gateway, get_store
from api.responses import success_response
from domain.mappers import documents_out
from domain.schemas.payment_schemas import PaymentIntentCreate, PaymentIntentResponse, PaymentSave
from services.payment_service import PaymentService

router = APIRouter(tags=["Payments"])
logger = logging.getLogger("hostelmeals.api.payments")


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentCreate,
    gateway: StripeGateway = Depends(get_payment_gateway),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.user_email)
    secret = PaymentService.create_payment_intent(
        gateway, body.amount, body.package_name, body.user_email
    )
    return PaymentIntentResponse(client_secret=secret)


@router.post("/payments/save")
def save_payment(
    body: PaymentSave,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Record a confirmed payment and upgrade the buyer's badge"""
    assert_actor(identity, body.user_email)
    badge = PaymentService.save_payment(store, body.to_document())
    return success_response({"badge": badge.value}, "Payment saved")


@router.post("/payments/reconcile")
def reconcile_payments(
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    repaired = PaymentService.reconcile_payments(store, x_admin_email)
    return success_response({"repaired": repaired}, "Payments reconciled")


@router.get("/payments/{user_email}")
def payment_history(user_email: str, store: MongoStore = Depends(get_store)):
    history = PaymentService.get_history(store, user_email)
    if not history:
        return success_response([], "No payment history found")
    return success_response(documents_out(history))
