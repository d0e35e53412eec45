"""Interactive CLI simulator — walk the login flow without the mobile app."""

import asyncio
from datetime import date, timedelta

from care4u.config import settings
from care4u.database.engine import build_engine, build_session_factory, init_db
from care4u.database.repository import IdentityStore
from care4u.services.auth_service import AuthService
from care4u.services.email_service import LoggingNotifier
from care4u.services.otp_manager import OTPManager
from care4u.services.result import Err
from care4u.services.token_issuer import TokenIssuer

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

SAMPLE_PROFILE = {
    "first_name": "Sam",
    "last_name": "Lee",
    "contact_number": "+15550001111",
    "birth_date": date(1988, 1, 1),
    "gender": "other",
    "height": 170,
    "weight": 70,
    "emergency_contact_name": "Alex Lee",
    "emergency_contact_number": "+15550002222",
    "dietary_preference": "non-veg",
    "calorie_intake_goal": 2000,
    "calorie_burn_goal": 500,
}


class EchoNotifier(LoggingNotifier):
    """Prints the code so the simulator user can type it back in."""

    async def send_otp(self, to_email: str, code: str) -> bool:
        print(f"{DIM}📧 (email to {to_email}) Your code is {BOLD}{code}{RESET}")
        return True


def say(text: str, ok: bool = True) -> None:
    colour = GREEN if ok else RED
    print(f"{colour}{BOLD}Server:{RESET} {text}\n")


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print(f"  🩺  {settings.app_name} — Login Simulator")
    print(f"{'=' * 52}{RESET}\n")
    print(f"{DIM}Commands: login, resend, verify <code>, profile, check, quit{RESET}\n")

    engine = build_engine(settings.database_url)
    await init_db(engine)
    session_factory = build_session_factory(engine)
    token_issuer = TokenIssuer.from_settings()
    notifier = EchoNotifier()

    email = input(f"{YELLOW}Email to simulate: {RESET}").strip() or "demo@example.com"
    token: str | None = None
    user_id: int | None = None

    while True:
        try:
            command = input(f"{BLUE}{BOLD}You:{RESET} ").strip()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if not command:
            continue
        if command == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        async with session_factory() as session:
            store = IdentityStore(session)
            otp_manager = OTPManager(
                store, notifier, ttl=timedelta(minutes=settings.otp_ttl_minutes)
            )
            service = AuthService(store, otp_manager, token_issuer)

            if command in ("login", "resend"):
                op = service.send_otp if command == "login" else service.resend_otp
                result = await op(email)
                if isinstance(result, Err):
                    say(result.message, ok=False)
                else:
                    user_id = result.value.user_id
                    say(f"OTP sent (user id {user_id}).")

            elif command.startswith("verify"):
                code = command.removeprefix("verify").strip()
                result = await service.verify_otp(email, code)
                if isinstance(result, Err):
                    say(result.message, ok=False)
                else:
                    login = result.value
                    token, user_id = login.token.token, login.user.id
                    say(
                        f"{login.message} — {login.token.kind} token, "
                        f"redirect to '{login.redirect_to}', new user: {login.is_new_user}"
                    )

            elif command == "profile":
                if user_id is None:
                    say("Log in first.", ok=False)
                    continue
                result = await service.create_profile(user_id, SAMPLE_PROFILE)
                if isinstance(result, Err):
                    say(result.message, ok=False)
                else:
                    token = result.value.token.token
                    say(f"Profile created, BMI {result.value.profile.bmi}. Permanent token issued.")

            elif command == "check":
                if token is None:
                    say("No token yet.", ok=False)
                    continue
                result = await service.check_auth(token)
                if isinstance(result, Err):
                    say(result.message, ok=False)
                else:
                    say(f"Authenticated as {result.value.email}, profile complete: {result.value.has_profile}")

            else:
                say(f"Unknown command {command!r}", ok=False)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
