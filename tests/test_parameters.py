"""Tests for parameter marshalling and tool parameter models"""
import json

import pytest
from pydantic import ValidationError

from brainsait_mcp.errors import UnsupportedParameterType
from brainsait_mcp.models import (
    DrugInteractionParams,
    SymptomAnalysisParams,
    marshal_parameters,
    marshal_prompt_arguments,
)


class TestMarshalParameters:
    """Tests for marshal_parameters"""

    def test_supported_shapes_pass_through(self):
        parameters = {
            "medications": ["Aspirin", "Ibuprofen"],
            "patient_age": 45,
            "hipaa_mode": True,
            "language": "en",
            "vitals": {"unit": "metric", "flags": ["fasting"]},
        }
        assert marshal_parameters(parameters) == parameters

    def test_tuple_becomes_list(self):
        assert marshal_parameters({"symptoms": ("fever", "cough")}) == {"symptoms": ["fever", "cough"]}

    @pytest.mark.parametrize("value", [1.5, None, object(), b"bytes", {1, 2}])
    def test_unsupported_values_are_rejected(self, value):
        with pytest.raises(UnsupportedParameterType):
            marshal_parameters({"value": value})

    def test_mixed_list_is_rejected(self):
        with pytest.raises(UnsupportedParameterType, match="sequence of strings"):
            marshal_parameters({"medications": ["Aspirin", 5]})

    def test_nested_errors_name_the_path(self):
        with pytest.raises(UnsupportedParameterType, match="vitals.weight"):
            marshal_parameters({"vitals": {"weight": 72.5}})


class TestMarshalPromptArguments:
    """Tests for marshal_prompt_arguments"""

    def test_values_become_strings(self):
        arguments = marshal_prompt_arguments(
            {
                "patient_symptoms": "صداع",
                "require_encryption": True,
                "patient_age": 45,
                "medications": ["Aspirin"],
            }
        )
        assert arguments["patient_symptoms"] == "صداع"
        assert arguments["require_encryption"] == "true"
        assert arguments["patient_age"] == "45"
        assert json.loads(arguments["medications"]) == ["Aspirin"]

    def test_non_ascii_is_kept_in_json(self):
        arguments = marshal_prompt_arguments({"history": {"note": "لا يوجد"}})
        assert "لا يوجد" in arguments["history"]


class TestToolParameterModels:
    """Tests for tool parameter validation"""

    def test_drug_interaction_params(self):
        params = DrugInteractionParams.model_validate(
            {"medications": ["Aspirin"], "patient_age": 45, "language": "ar", "unknown": 1}
        )
        assert params.medications == ["Aspirin"]
        assert params.patient_age == 45
        assert params.language == "ar"

    def test_patient_age_range(self):
        with pytest.raises(ValidationError):
            DrugInteractionParams.model_validate({"patient_age": 200})

    def test_severity_range(self):
        with pytest.raises(ValidationError):
            SymptomAnalysisParams.model_validate({"symptoms": ["fever"], "severity": 11})
