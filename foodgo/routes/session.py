from fastapi import APIRouter, Depends

from foodgo.auth.session import CustomerSession, get_customer_session
from foodgo.core.container import Services, get_services
from foodgo.schemas.session import SessionCreate, SessionRead


class SessionRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.add_api_route("/session", self.login, methods=["POST"], response_model=SessionRead)
        self.add_api_route("/session", self.logout, methods=["DELETE"], response_model=dict)

    def login(self, payload: SessionCreate, services: Services = Depends(get_services)):
        session = services.sessions.login(payload.user_id, payload.first_name)
        return SessionRead(
            token=session.token,
            user_id=session.user_id,
            first_name=session.first_name,
            acquired_at=session.acquired_at,
        )

    def logout(
        self,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        services.sessions.logout(customer.token)
        return {"detail": "Logged out"}
