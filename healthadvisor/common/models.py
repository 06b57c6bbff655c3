"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServiceRecord:
    """One outpatient service line for one provider.

    Coordinates start at zero and are filled in exactly once, by
    ``set_coordinates``, right before the record is indexed.
    """

    apc_code: str
    provider_id: str
    provider_name: str
    provider_street_address: str
    provider_city: str
    provider_state: str
    provider_zip_code: str
    provider_region: str
    service_count: int
    average_estimated_charge: float
    average_total_payment: float
    latitude: float = field(default=0.0, init=False)
    longitude: float = field(default=0.0, init=False)
    _located: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def located(self) -> bool:
        return self._located

    def set_coordinates(self, latitude: float, longitude: float) -> None:
        if self._located:
            raise ValueError(f"Coordinates already set for provider {self.provider_id} / APC {self.apc_code}")
        self.latitude = float(latitude)
        self.longitude = float(longitude)
        self._located = True

    def address(self) -> str:
        return ", ".join(
            [
                self.provider_street_address,
                self.provider_city,
                self.provider_state,
                self.provider_zip_code,
            ]
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "APC": self.apc_code,
            "ProviderId": self.provider_id,
            "ProviderName": self.provider_name,
            "ProviderStreetAddress": self.provider_street_address,
            "ProviderCity": self.provider_city,
            "ProviderState": self.provider_state,
            "ProviderZipCode": self.provider_zip_code,
            "ProviderHRR": self.provider_region,
            "OutpatientServices": self.service_count,
            "AverageEstimatedSubmittedCharges": self.average_estimated_charge,
            "AverageTotalPayments": self.average_total_payment,
            "Latitude": self.latitude,
            "Longitude": self.longitude,
        }
