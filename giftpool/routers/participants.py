# giftpool/routers/participants.py

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from giftpool.common.deps import get_current_user, get_participant_service, require_admin
from giftpool.common.errors import BadRequestError
from giftpool.core.config import settings
from giftpool.models.participant import ImportResult
from giftpool.models.user import Coworker, User
from giftpool.services.participant_service import ParticipantService

router = APIRouter()


# coworker picker: every participant but me
@router.get("", response_model=List[Coworker])
def list_participants(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    service: ParticipantService = Depends(get_participant_service),
):
    return service.list_coworkers(campaign_id, current_user)


@router.post("/import", response_model=ImportResult)
async def import_participants(
    campaign_id: str,
    file: Optional[UploadFile] = File(default=None),
    admin: User = Depends(require_admin),
    service: ParticipantService = Depends(get_participant_service),
):
    if file is None:
        raise BadRequestError("No CSV file uploaded")

    # read one byte past the limit to tell "exactly at" from "over"
    content = await file.read(settings.CSV_MAX_BYTES + 1)
    if len(content) > settings.CSV_MAX_BYTES:
        raise BadRequestError("CSV file too large")

    return service.import_csv(campaign_id, content)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_participant(
    campaign_id: str,
    user_id: str,
    admin: User = Depends(require_admin),
    service: ParticipantService = Depends(get_participant_service),
):
    service.remove_participant(campaign_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
