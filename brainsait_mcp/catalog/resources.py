from __future__ import annotations

import json
from enum import Enum

from ..models import ResourceDefinition
from . import ContentRegistry


class ResourceUri(str, Enum):
    PATIENT_DATA = "brainsait://medical/patient-data"
    LITERATURE = "brainsait://medical/literature"


def load_patient_data() -> str:
    return json.dumps({"patient_id": "encrypted_data", "access_level": "hipaa_compliant"})


def load_literature() -> str:
    return "Medical literature and guidelines database access granted"


def register_resources(registry: ContentRegistry) -> None:
    registry.add_resource(
        ResourceDefinition(
            uri=ResourceUri.PATIENT_DATA.value,
            name="Patient Data Repository",
            description="HIPAA-compliant patient data access",
            mime_type="application/json",
            requires_encryption=True,
        ),
        load_patient_data,
    )

    registry.add_resource(
        ResourceDefinition(
            uri=ResourceUri.LITERATURE.value,
            name="Medical Literature Database",
            description="Access to medical literature and guidelines",
            mime_type="text/plain",
            requires_encryption=False,
        ),
        load_literature,
    )
