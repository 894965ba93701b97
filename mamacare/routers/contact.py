from fastapi import APIRouter, Depends, Request

from mamacare.core.rate_limiter import rate_limit_ip
from mamacare.schemas.auth import ContactRequest, MessageResponse
from mamacare.services.contact_service import ContactService

router = APIRouter(prefix="/api", tags=["contact"])


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


@router.post("/contact", response_model=MessageResponse, response_model_exclude_none=True, dependencies=[Depends(rate_limit_ip)])
def contact(body: ContactRequest, contact_service: ContactService = Depends(get_contact_service)):
    contact_service.submit(body.name, body.email, body.message)
    return MessageResponse(message="Email sent successfully!")
