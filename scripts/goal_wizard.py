"""Run the goal wizard from a terminal against a running API server.

The session is stored in the current directory between runs, so an
interrupted wizard resumes at the step it reached.

Usage:
    # Start (or resume) a wizard
    python scripts/goal_wizard.py --user-id alice --token <jwt>

    # Mint a token locally from JWT_SECRET instead of passing one
    python scripts/goal_wizard.py --user-id alice

    # Throw away the stored session and start over
    python scripts/goal_wizard.py --user-id alice --reset
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.wizard.client import GenerationClient
from app.wizard.controller import GoalWizard
from app.wizard.session import SessionFile


def ask(prompt: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{prompt}{suffix}: ").strip()
    return value or default


def show_error(wizard: GoalWizard) -> None:
    if wizard.error:
        print(f"Error: {wizard.error}")


async def run_wizard(wizard: GoalWizard, store: SessionFile) -> None:
    """Walk the remaining steps, saving the session after each one."""
    session = wizard.session

    if wizard.step == 1:
        wizard.set_goal_title(ask("What is your goal?", session.goal_title))
        if not await wizard.request_questions():
            show_error(wizard)
            return
        store.save(wizard.session)

    if wizard.step == 2:
        for index, question in enumerate(session.questions):
            current = session.answers[index] if index < len(session.answers) else ""
            wizard.set_answer(index, ask(question, current))
        if not await wizard.request_smart():
            show_error(wizard)
            store.save(wizard.session)
            return
        store.save(wizard.session)

    if wizard.step == 3:
        print(f"\nGoal: {session.goal_title}")
        for field, value in session.smart.model_dump().items():
            wizard.set_smart_field(field, ask(field.capitalize(), value))
        if not await wizard.request_actions():
            show_error(wizard)
            store.save(wizard.session)
            return
        store.save(wizard.session)

    if wizard.step == 4:
        while True:
            print("\nActions:")
            for index, action in enumerate(wizard.session.actions, start=1):
                print(f"  {index}. {action.title} ({action.frequency}) due {action.user_deadline or '?'}")

            choice = ask("[m]ore, [e]dit N, [r]emove N, [s]ave, [q]uit", "s").lower()
            if choice == "m":
                if not await wizard.request_more_actions():
                    show_error(wizard)
            elif choice.startswith(("e", "r")) and choice[1:].strip().isdigit():
                index = int(choice[1:].strip()) - 1
                if not 0 <= index < len(wizard.session.actions):
                    print("No such action.")
                elif choice.startswith("r"):
                    wizard.remove_action(index)
                else:
                    action = wizard.session.actions[index]
                    wizard.update_action(
                        index,
                        title=ask("Title", action.title),
                        description=ask("Description", action.description),
                        user_deadline=ask("Deadline (YYYY-MM-DD)", action.user_deadline),
                    )
            elif choice == "s":
                if await wizard.save():
                    print(wizard.status_message)
                    store.clear()
                    return
                show_error(wizard)
            elif choice == "q":
                break
            store.save(wizard.session)

    store.save(wizard.session)


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a SMART goal plan interactively")
    parser.add_argument(
        "--api-url",
        default="http://localhost:8000",
        help="Base URL of the goal wizard API",
    )
    parser.add_argument(
        "--user-id",
        required=True,
        help="User ID the goal is saved for",
    )
    parser.add_argument(
        "--token",
        help="Bearer token; minted from JWT_SECRET when omitted",
    )
    parser.add_argument(
        "--session-dir",
        default=".",
        help="Directory holding the saved wizard session",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard any saved session and start over",
    )

    args = parser.parse_args()

    token = args.token
    if not token:
        from app.utils.auth import create_access_token

        token = create_access_token(args.user_id)

    store = SessionFile(Path(args.session_dir))
    if args.reset:
        store.clear()

    session = store.load()
    session.user_id = args.user_id

    client = GenerationClient(args.api_url, token=token)
    try:
        await run_wizard(GoalWizard(client, session), store)
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
