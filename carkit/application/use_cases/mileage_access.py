from __future__ import annotations

from carkit.application.dto.garage import MileageData
from carkit.domain.entities.mileage import Mileage
from carkit.domain.exceptions import MileageNotFoundError

from .ownership import ChildResourceAccess


class MileageAccessUseCase(ChildResourceAccess[Mileage]):
    records_attr = "mileages"
    entity_type = Mileage
    data_type = MileageData
    not_found_error = MileageNotFoundError
    not_found_message = "Mileage entry not found."
