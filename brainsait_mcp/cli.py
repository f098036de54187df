"""
brainsait-client: command-line client for the BrainSAIT healthcare MCP server.

Usage:
  brainsait-client                                  # interactive mode over stdio
  brainsait-client list-tools
  brainsait-client consult --prompt-name arabic-medical-consultation --symptoms "صداع"
  brainsait-client analyze --tool-name drug-interaction-checker --medications Aspirin,Ibuprofen --age 45
  brainsait-client demo                             # in-process walk-through, no server needed
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import anyio
from mcp.shared.exceptions import McpError

from .catalog.prompts import PromptId
from .catalog.resources import ResourceUri
from .catalog.tools import ToolId
from .client import HealthcareClient
from .config import Settings, configure_logging
from .errors import HealthcareMCPError
from .language import Language, detect_language, shape_for_display
from .main import add_connection_arguments, create_server, settings_from_args
from .transports import InProcessClientHandle, kind_from_settings, open_transport

logger = logging.getLogger(__name__)

Command = Callable[[HealthcareClient, argparse.Namespace, Language], Awaitable[None]]

HELP_TEXT = """\
BrainSAIT Healthcare MCP Client Commands:

General Commands:
  help          - Show this help message
  quit/exit     - Exit the client

Healthcare Commands:
  prompts       - List available medical prompts
  tools         - List available healthcare tools
  resources     - List available medical resources
  drug-check    - Check drug interactions
  symptom-check - Analyze symptoms
"""


def split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


async def _ask(prompt: str) -> str:
    return await anyio.to_thread.run_sync(input, prompt)


async def print_prompts(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("Available Medical Prompts:")
    for index, prompt in enumerate(await client.list_prompts(), 1):
        print(f"  {index}. {prompt.name}: {prompt.description or ''}")


async def print_tools(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("Available Healthcare Tools:")
    for index, tool in enumerate(await client.list_tools(), 1):
        print(f"  {index}. {tool.name}: {tool.description or ''}")


async def print_resources(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("Available Medical Resources:")
    for index, resource in enumerate(await client.list_resources(), 1):
        print(f"  {index}. {resource.name} ({resource.uri}): {resource.description or 'No description'}")


async def consult(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    patient_data: Dict[str, Any] = {}
    if args.symptoms:
        patient_data["patient_symptoms"] = args.symptoms
    if args.history:
        patient_data["medical_history"] = args.history

    result = await client.consult(args.prompt_name, patient_data, language)
    print("\nMedical Consultation Result:")
    print(result)


def tool_parameters(args: argparse.Namespace) -> Dict[str, Any]:
    if args.tool_name == ToolId.DRUG_INTERACTION_CHECKER.value:
        parameters: Dict[str, Any] = {"medications": split_list(args.medications)}
        if args.age is not None:
            parameters["patient_age"] = args.age
        return parameters
    if args.tool_name == ToolId.SYMPTOM_ANALYZER.value:
        return {
            "symptoms": split_list(args.symptoms),
            "duration": args.duration,
            "severity": args.severity,
        }
    return {}


async def analyze(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    result = await client.run_tool(args.tool_name, tool_parameters(args), language)
    print("\nHealthcare Tool Analysis:")
    print(result)


async def drug_check(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("Drug Interaction Checker")
    medications = split_list(await _ask("Enter medications (comma-separated): "))
    age_input = (await _ask("Enter patient age: ")).strip()
    if not age_input.isdigit():
        print("Patient age must be a whole number")
        return

    result = await client.run_tool(
        ToolId.DRUG_INTERACTION_CHECKER.value,
        {"medications": medications, "patient_age": int(age_input)},
        language,
    )
    print("\nAnalysis Result:")
    print(result)


async def symptom_check(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("Symptom Analyzer")
    symptoms = split_list(await _ask("Enter symptoms (comma-separated): "))

    result = await client.run_tool(
        ToolId.SYMPTOM_ANALYZER.value,
        {"symptoms": symptoms, "duration": "recent", "severity": 5},
        language,
    )
    print("\nAnalysis Result:")
    print(result)


INTERACTIVE_COMMANDS: Dict[str, Command] = {
    "prompts": print_prompts,
    "tools": print_tools,
    "resources": print_resources,
    "drug-check": drug_check,
    "symptom-check": symptom_check,
}


async def interactive(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    print("BrainSAIT Healthcare MCP Client - Interactive Mode")
    print("Type 'help' for available commands, 'quit' to exit")
    print(f"Language: {'العربية' if language is Language.ARABIC else 'English'}")
    print()

    while True:
        try:
            line = (await _ask("brainsait> ")).strip()
        except EOFError:
            break
        if not line:
            continue

        command = line.split(maxsplit=1)[0].lower()
        if command in ("quit", "exit"):
            break
        if command == "help":
            print(HELP_TEXT)
            continue

        handler = INTERACTIVE_COMMANDS.get(command)
        if handler is None:
            print(f"Unknown command: {command}")
            print("Type 'help' for available commands")
            continue

        try:
            await handler(client, args, language)
        except EOFError:
            break
        except HealthcareMCPError as e:
            print(f"Error: {e}")
        except McpError as e:
            print(f"Error: {e.error.message}")

    print("Goodbye! وداعاً")


async def demo(client: HealthcareClient, args: argparse.Namespace, language: Language) -> None:
    """Walk through every operation against an in-process server."""
    print("BrainSAIT Healthcare AI System Demo")
    print()

    print("Language processing:")
    for sample in ("مرحبا بك في نظام BrainSAIT", "Welcome to BrainSAIT", "12345"):
        detected = detect_language(sample)
        print(f"  {sample!r} -> {detected.value}: {shape_for_display(sample, detected)!r}")
    print()

    await print_prompts(client, args, language)
    await print_tools(client, args, language)
    await print_resources(client, args, language)
    print()

    consultation = await client.consult(
        PromptId.ARABIC_MEDICAL_CONSULTATION.value,
        {"patient_symptoms": "صداع وحمى", "medical_history": "لا يوجد"},
        Language.ARABIC,
    )
    print("Medical Consultation Result:")
    print(consultation)
    print()

    interactions = await client.run_tool(
        ToolId.DRUG_INTERACTION_CHECKER.value,
        {"medications": ["Aspirin", "Ibuprofen"], "patient_age": 45},
        language,
    )
    print("Drug Interaction Analysis:")
    print(interactions)
    print()

    literature = await client.access_resource(ResourceUri.LITERATURE.value)
    print("Medical Literature:")
    print(literature.decode("utf-8"))
    print()
    print("Demo completed!")


COMMANDS: Dict[str, Command] = {
    "list-prompts": print_prompts,
    "list-tools": print_tools,
    "list-resources": print_resources,
    "consult": consult,
    "analyze": analyze,
    "interactive": interactive,
    "demo": demo,
}


async def run_client(args: argparse.Namespace, settings: Settings) -> None:
    language = Language.parse(args.language)
    command = args.command or "interactive"

    if command == "demo":
        server = create_server(settings)
        handle = InProcessClientHandle(server.mcp_server)
    else:
        handle = open_transport(kind_from_settings(settings), settings)

    logger.info(
        "Starting BrainSAIT MCP Client: transport=%s language=%s hipaa_mode=%s",
        handle.kind.name,
        language.value,
        settings.compliant_mode,
    )

    client = HealthcareClient(settings)
    await client.connect(handle)
    try:
        await COMMANDS[command](client, args, language)
    finally:
        await client.disconnect()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brainsait-client",
        description="BrainSAIT MCP client for healthcare AI services",
    )
    add_connection_arguments(parser)
    parser.add_argument("--edge-worker-url", default=None, help="Edge worker URL (edge-worker transport)")
    parser.add_argument("--edge-worker-token", default=None, help="Edge worker API token (edge-worker transport)")
    parser.add_argument("--tls-cafile", default=None, help="CA bundle for the network transport")
    parser.add_argument("--language", default="en", help="Language preference (ar, en)")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("list-prompts", help="List available medical prompts")
    subparsers.add_parser("list-tools", help="List available healthcare tools")
    subparsers.add_parser("list-resources", help="List available medical resources")

    consult_parser = subparsers.add_parser("consult", help="Run a medical consultation prompt")
    consult_parser.add_argument("--prompt-name", required=True, help="Prompt name for consultation")
    consult_parser.add_argument("--symptoms", default=None, help="Patient symptoms")
    consult_parser.add_argument("--history", default=None, help="Medical history")

    analyze_parser = subparsers.add_parser("analyze", help="Run a healthcare tool")
    analyze_parser.add_argument("--tool-name", required=True, help="Tool name for analysis")
    analyze_parser.add_argument("--medications", default=None, help="Medications list (comma-separated)")
    analyze_parser.add_argument("--age", type=int, default=None, help="Patient age")
    analyze_parser.add_argument("--symptoms", default=None, help="Symptoms list (comma-separated)")
    analyze_parser.add_argument("--duration", default="1 week", help="Duration of symptoms")
    analyze_parser.add_argument("--severity", type=int, default=5, help="Severity level (1-10)")

    subparsers.add_parser("interactive", help="Interactive mode (default)")
    subparsers.add_parser("demo", help="Walk through every operation against an in-process server")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    settings = settings_from_args(
        args,
        edge_worker_url=args.edge_worker_url,
        edge_worker_token=args.edge_worker_token,
        tls_cafile=args.tls_cafile,
    )
    configure_logging(settings.log_level)

    try:
        anyio.run(run_client, args, settings)
    except HealthcareMCPError as e:
        parser.exit(1, f"Error: {e}\n")
    except McpError as e:
        parser.exit(1, f"Error: {e.error.message}\n")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
