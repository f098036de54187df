from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from ..language import Language
from ..models import PromptDefinition
from . import ContentRegistry


class PromptId(str, Enum):
    ARABIC_MEDICAL_CONSULTATION = "arabic-medical-consultation"
    CLINICAL_DECISION_SUPPORT = "clinical-decision-support"


def _text(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    return "" if value is None else str(value)


def generate_arabic_consultation(arguments: Mapping[str, Any], language: Language) -> str:
    """
    Arabic consultation template. The body is always Arabic; the requested
    language only drives display shaping.
    """
    symptoms = _text(arguments, "patient_symptoms")
    history = _text(arguments, "medical_history")
    return (
        "استشارة طبية - BrainSAIT\n"
        "======================\n"
        "\n"
        f"الأعراض المُبلغ عنها: {symptoms}\n"
        f"التاريخ المرضي: {history}\n"
        "\n"
        "التوصيات الأولية:\n"
        "- يُنصح بمراجعة طبيب مختص\n"
        "- مراقبة الأعراض وتسجيل تطورها\n"
        "- الحفاظ على نمط حياة صحي\n"
        "\n"
        "تنبيه: هذه استشارة أولية ولا تغني عن الفحص الطبي المباشر"
    )


def generate_clinical_decision_support(arguments: Mapping[str, Any], language: Language) -> str:
    patient_data = _text(arguments, "patient_data")
    diagnosis_request = _text(arguments, "diagnosis_request")
    return (
        "BrainSAIT Clinical Decision Support\n"
        "==================================\n"
        "\n"
        f"Patient Data Analysis: {patient_data}\n"
        f"Diagnosis Request: {diagnosis_request}\n"
        "\n"
        "Clinical Recommendations:\n"
        "- Review patient history for relevant patterns\n"
        "- Consider differential diagnosis options\n"
        "- Recommend appropriate diagnostic tests\n"
        "- Monitor patient response to treatment\n"
        "\n"
        "Evidence-based guidelines suggest further evaluation"
    )


def register_prompts(registry: ContentRegistry) -> None:
    registry.add_prompt(
        PromptDefinition(
            id=PromptId.ARABIC_MEDICAL_CONSULTATION.value,
            description="استشارة طبية باللغة العربية - Medical consultation in Arabic",
            argument_specs={
                "patient_symptoms": "أعراض المريض - Patient symptoms",
                "medical_history": "التاريخ المرضي - Medical history",
                "language": "Response language (ar/en)",
            },
        ),
        generate_arabic_consultation,
    )

    registry.add_prompt(
        PromptDefinition(
            id=PromptId.CLINICAL_DECISION_SUPPORT.value,
            description="Clinical decision support for healthcare professionals",
            argument_specs={
                "patient_data": "Complete patient data",
                "diagnosis_request": "Specific diagnosis assistance needed",
                "language": "Response language (ar/en)",
            },
        ),
        generate_clinical_decision_support,
    )
