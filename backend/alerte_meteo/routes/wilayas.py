# alerte_meteo/routes/wilayas.py
# ------------------------------------------------------------
# Wilaya geodata API
#
# Read-only name -> coordinates table used by the public map to
# place markers on the wilayas named by the current alert.
# ------------------------------------------------------------

from fastapi import APIRouter, Response

from ..geo import get_dataset
from ..models import WilayaDataset

router = APIRouter(tags=["wilayas"])


@router.get("/api/wilayas", response_model=WilayaDataset)
def list_wilayas(response: Response):
    """
    The whole dataset; it only changes on redeploy, so clients
    may cache it.
    """
    response.headers["Cache-Control"] = "public, max-age=3600"
    return get_dataset()
