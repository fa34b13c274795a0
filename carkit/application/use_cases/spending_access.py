from __future__ import annotations

from carkit.application.dto.garage import SpendingData
from carkit.domain.entities.spending import Spending
from carkit.domain.exceptions import SpendingNotFoundError

from .ownership import ChildResourceAccess


class SpendingAccessUseCase(ChildResourceAccess[Spending]):
    records_attr = "spendings"
    entity_type = Spending
    data_type = SpendingData
    not_found_error = SpendingNotFoundError
    not_found_message = "Spending entry not found."
