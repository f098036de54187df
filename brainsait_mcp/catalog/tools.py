from __future__ import annotations

from enum import Enum

from ..language import Language
from ..models import DrugInteractionParams, SymptomAnalysisParams, ToolDefinition
from . import ContentRegistry


class ToolId(str, Enum):
    DRUG_INTERACTION_CHECKER = "drug-interaction-checker"
    SYMPTOM_ANALYZER = "symptom-analyzer"


def analyze_drug_interactions(params: DrugInteractionParams, language: Language) -> str:
    """Templated interaction report for the supplied medications."""
    if language is Language.ARABIC:
        return (
            "فحص التفاعلات الدوائية - BrainSAIT\n"
            "===============================\n"
            "\n"
            f"الأدوية المُدخلة: {'، '.join(params.medications)}\n"
            f"عمر المريض: {params.patient_age} سنة\n"
            "\n"
            "نتائج الفحص:\n"
            "- لا توجد تفاعلات خطيرة محتملة\n"
            "- يُنصح بمراقبة الآثار الجانبية\n"
            "- استشر الصيدلي للمزيد من المعلومات"
        )
    return (
        "Drug Interaction Analysis - BrainSAIT\n"
        "====================================\n"
        "\n"
        f"Medications: {', '.join(params.medications)}\n"
        f"Patient Age: {params.patient_age} years\n"
        "\n"
        "Analysis Results:\n"
        "- No major drug interactions detected\n"
        "- Monitor for side effects\n"
        "- Consult pharmacist for detailed information"
    )


def analyze_symptoms(params: SymptomAnalysisParams, language: Language) -> str:
    if language is Language.ARABIC:
        return (
            "تحليل الأعراض - BrainSAIT\n"
            "=======================\n"
            "\n"
            f"الأعراض: {'، '.join(params.symptoms)}\n"
            f"المدة: {params.duration}\n"
            f"شدة الأعراض: {params.severity}/10\n"
            "\n"
            "التحليل الأولي:\n"
            "- تتطلب هذه الأعراض تقييم طبي\n"
            "- يُنصح بمراجعة الطبيب في أقرب وقت\n"
            "- احتفظ بسجل للأعراض وتطورها"
        )
    return (
        "Symptom Analysis - BrainSAIT\n"
        "===========================\n"
        "\n"
        f"Symptoms: {', '.join(params.symptoms)}\n"
        f"Duration: {params.duration}\n"
        f"Severity: {params.severity}/10\n"
        "\n"
        "Preliminary Analysis:\n"
        "- These symptoms require medical evaluation\n"
        "- Recommend consulting a physician soon\n"
        "- Keep a record of symptom progression"
    )


def register_tools(registry: ContentRegistry) -> None:
    registry.add_tool(
        ToolDefinition(
            id=ToolId.DRUG_INTERACTION_CHECKER.value,
            description="فحص التفاعلات الدوائية - Drug interaction analysis",
            input_schema={
                "medications": "List of medications",
                "patient_age": "Patient age",
                "language": "Preferred language (ar/en)",
            },
        ),
        analyze_drug_interactions,
        DrugInteractionParams,
    )

    registry.add_tool(
        ToolDefinition(
            id=ToolId.SYMPTOM_ANALYZER.value,
            description="تحليل الأعراض - Symptom analysis and preliminary diagnosis",
            input_schema={
                "symptoms": "List of symptoms",
                "duration": "Duration of symptoms",
                "severity": "Severity level (1-10)",
                "language": "Preferred language (ar/en)",
            },
        ),
        analyze_symptoms,
        SymptomAnalysisParams,
    )
