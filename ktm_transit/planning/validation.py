from typing import List
from ktm_transit.network.service import NetworkDataProvider
from ktm_transit.planning.schemas import JourneyRequest, JourneyValidationError

class JourneyValidator:
    """Checks the preconditions the planning engine leaves to its callers"""

    def __init__(self, network: NetworkDataProvider):
        self.network = network

    def validate_journey_request(self, request: JourneyRequest) -> List[JourneyValidationError]:
        errors = []

        if request.from_stop_id == request.to_stop_id:
            errors.append(JourneyValidationError(
                error_code="SAME_STOP",
                error_message="Starting point and destination cannot be the same",
                field="to_stop_id"
            ))

        if not self.network.get_stop_by_id(request.from_stop_id):
            errors.append(JourneyValidationError(
                error_code="INVALID_FROM_STOP",
                error_message=f"Origin stop with ID {request.from_stop_id} not found",
                field="from_stop_id"
            ))

        if not self.network.get_stop_by_id(request.to_stop_id):
            errors.append(JourneyValidationError(
                error_code="INVALID_TO_STOP",
                error_message=f"Destination stop with ID {request.to_stop_id} not found",
                field="to_stop_id"
            ))

        return errors
