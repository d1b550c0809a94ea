# sanam/routers/admin.py
from fastapi import APIRouter, Depends

from ..auth import sign_in
from ..deps import get_session_gate, require_admin
from ..models import GateOut, LoginIn, TokenOut
from ..session import SessionGate

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn):
    return sign_in(payload.email, payload.password)


@router.get("/session", response_model=GateOut)
def session_state(gate: SessionGate = Depends(get_session_gate)):
    decision = gate.route()
    return GateOut(state=gate.state.value, action=decision.action, redirect=decision.redirect)


@router.post("/logout")
def logout(gate: SessionGate = Depends(require_admin)):
    # redirect straight away; the sign-out notification lands on the same page anyway
    return {"ok": True, "redirect": gate.logout()}
