"""
Inbox Service

Business logic for disposable inboxes on Mail.tm:
- Domain selection
- Address and password generation
- Account creation and token issuance
"""

from typing import Any, Dict, List

from tempbox.clients.mailtm import MailTMClient
from tempbox.core.exceptions import MailApiException
from tempbox.core.logging import get_logger
from tempbox.core.security import generate_password, generate_random_address
from tempbox.schemas.mail import InboxCreated

logger = get_logger(__name__)

MAX_ADDRESS_ATTEMPTS = 3


def active_public_domains(domains_response: Dict[str, Any]) -> List[str]:
    """
    Pick usable domain names out of a Mail.tm ``/domains`` response.

    Raises:
        MailApiException: If the response is not a hydra collection
    """
    members = domains_response.get("hydra:member") if isinstance(domains_response, dict) else None
    if not isinstance(members, list):
        raise MailApiException(
            message="Invalid response from Mail.tm domains API",
            status_code=502,
            error_type="api",
        )

    return [
        member["domain"]
        for member in members
        if member.get("isActive") and not member.get("isPrivate") and member.get("domain")
    ]


class InboxService:
    """Service for provisioning disposable Mail.tm inboxes."""

    def __init__(self, mail_client: MailTMClient):
        self.mail_client = mail_client

    async def create_inbox(self) -> InboxCreated:
        """
        Create a new mailbox on the first active public domain.

        Returns:
            InboxCreated: Account id, address, password and bearer token

        Raises:
            MailApiException: If no domain is available or Mail.tm fails
        """
        domains = active_public_domains(await self.mail_client.get_domains())
        if not domains:
            raise MailApiException(
                message="No active domains available from Mail.tm",
                status_code=503,
                error_type="api",
            )

        domain = domains[0]
        password = generate_password()

        # A 422 means the address is taken; try a fresh one
        for attempt in range(1, MAX_ADDRESS_ATTEMPTS + 1):
            address = generate_random_address(domain)
            try:
                account = await self.mail_client.create_account(address, password)
                break
            except MailApiException as e:
                if e.status_code != 422 or attempt == MAX_ADDRESS_ATTEMPTS:
                    raise
                logger.info("inbox_address_taken", address=address, attempt=attempt, max_attempts=MAX_ADDRESS_ATTEMPTS)

        token = await self.mail_client.get_token(account["address"], password)

        logger.info("inbox_created", address=account["address"], domain=domain)

        return InboxCreated(
            account_id=account["id"],
            address=account["address"],
            password=password,
            token=token["token"],
        )
