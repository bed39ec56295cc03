import argparse
import asyncio
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv(".env.local")
load_dotenv()

from config.config import Config
from models.chat import Conversation
from orchestrator.core import ChatOrchestrator
from tools.web.contracts import SearchOptions
from tools.web.factory import create_search_client_from_config
from tools.web.research_pack import format_search_results


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mThinking {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    sys.stdout.write('\r' + ' ' * 20 + '\r')
    sys.stdout.flush()


def print_help() -> None:
    print("\n=== Available Commands ===")
    print("help           - Show this help message")
    print("search on|off  - Enable or disable web search augmentation")
    print("clear          - Forget the conversation so far")
    print("exit/quit      - Exit the program\n")


def run_chat(config: Config) -> int:
    orchestrator = ChatOrchestrator.from_config(config)
    conversation = Conversation()
    enable_search = orchestrator.search_client is not None

    print("\n=== Aria Chat ===")
    print(f"Using {config.get_model_info()}")
    print("Type 'exit' to quit or 'help' for commands\n")

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting...")
            return 0

        if not user_input:
            continue

        command = user_input.lower()
        if command in ('exit', 'quit'):
            print("\nGoodbye!")
            return 0
        if command == 'help':
            print_help()
            continue
        if command == 'clear':
            conversation = conversation.clear()
            print("Conversation cleared.\n")
            continue
        if command in ('search on', 'search off'):
            enable_search = command.endswith('on') and orchestrator.search_client is not None
            print(f"Web search {'enabled' if enable_search else 'disabled'}.\n")
            continue

        stop_animation = threading.Event()
        loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
        loading_thread.daemon = True
        loading_thread.start()

        try:
            result = asyncio.run(
                orchestrator.ask(user_input, history=conversation.messages, enable_search=enable_search)
            )
        finally:
            stop_animation.set()
            loading_thread.join()

        if not result.success:
            print(f"\nError: {result.error} ({result.details})\n")
            continue

        print(f"\nAria: {result.message}")
        if result.search:
            print(
                f"[Searched '{result.search.query}' via {result.search.backend}: "
                f"{result.search.result_count} results, trigger={result.search.trigger}]"
            )
        print(f"[Tokens used: {result.usage.total_tokens}]\n")

        conversation = conversation.add_message("user", user_input).add_message("assistant", result.message)


def run_search(config: Config, query: str, max_results: int) -> int:
    client = create_search_client_from_config(config)
    if client is None:
        print("Web search is not configured. Set LANGSEARCH_API_KEY or SEARXNG_INSTANCES.")
        return 1

    print(f"Testing {client.name}...\n")
    try:
        outcome = asyncio.run(
            client.search_web(query, SearchOptions(max_results=max_results, timeout_ms=config.SEARCH_TIMEOUT_MS))
        )
    except Exception as e:
        print(f"Search failed: {e}")
        return 1

    print(format_search_results(outcome))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Aria Chat command line")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("chat", help="Interactive chat (default)")
    search_parser = subparsers.add_parser("search", help="Run one web search and print the results")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--max-results", type=int, default=3)

    args = parser.parse_args(argv)
    config = Config()

    if args.command == "search":
        return run_search(config, args.query, args.max_results)

    if not config.validate():
        print("Configuration is incomplete. Check the logs and your .env file.")
        return 1
    return run_chat(config)


if __name__ == "__main__":
    sys.exit(main())
