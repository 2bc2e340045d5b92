"""Publish command orchestration for CLI.

This module provides the PublishCommand class that wires configuration,
credentials, the content model and the Confluence client together, runs the
publisher and translates failures into exit codes.
"""

import logging
from pathlib import Path
from typing import Optional

import requests

from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.confluence_client.api_client import ConfluenceApiClient
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import (
    ConfluenceError,
    InvalidCredentialsError,
    MultipleResultsError,
    RequestFailedError,
)
from src.confluence_client.http_transport import HttpTransport
from src.publisher.config_loader import ConfigLoader
from src.publisher.errors import PublishError, PublisherError
from src.publisher.model_loader import ContentModelLoader
from src.publisher.models import PublishConfig
from src.publisher.publisher import ConfluencePublisher

logger = logging.getLogger(__name__)


def exit_code_for(error: Exception) -> ExitCode:
    """Map a publish failure to the exit code reported by the CLI.

    Args:
        error: The failure, either a Confluence error or a PublishError wrapping one

    Returns:
        ExitCode describing the failure class
    """
    cause = error.cause if isinstance(error, PublishError) else error

    if isinstance(cause, MultipleResultsError):
        return ExitCode.AMBIGUOUS_REMOTE_STATE
    if isinstance(cause, InvalidCredentialsError):
        return ExitCode.AUTH_ERROR
    if isinstance(cause, RequestFailedError):
        if cause.status_code in (401, 403):
            return ExitCode.AUTH_ERROR
        if cause.status_code is None and isinstance(cause.cause, requests.RequestException):
            return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


class PublishCommand:
    """Runs a complete publish for the CLI.

    The publish workflow:
        1. Load the publish configuration
        2. Load the content model written by the rendering stage
        3. Build the HTTP transport and Confluence client from credentials
        4. Publish the page tree and print a summary
        5. Return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> command = PublishCommand(output_handler=output)
        >>> exit_code = command.run("build/confluence-content-model.yaml")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = ConfigLoader.DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        client: Optional[ConfluenceApiClient] = None,
    ):
        """Initialize publish command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for Confluence credentials (optional)
            client: Pre-built Confluence client (optional, skips credential loading)
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.client = client

    def run(self, model_path: str, continue_on_error: bool = False) -> ExitCode:
        """Execute the publish operation.

        Args:
            model_path: Path to the content model file
            continue_on_error: Keep publishing other top-level pages after a failure

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            logger.info(f"Loading configuration from {self.config_path}")
            if not Path(self.config_path).exists():
                raise ConfigNotFoundError(self.config_path)
            config = ConfigLoader.load(self.config_path)

            pages = ContentModelLoader.load(model_path)
            self.output_handler.info(
                f"Publishing {len(pages)} top-level page(s) to space '{config.space_key}'"
            )

            publisher = ConfluencePublisher(self._get_client(config), config)
            with self.output_handler.spinner("Publishing pages..."):
                result = publisher.publish(pages, continue_on_error=continue_on_error)

            self.output_handler.print_summary(result)
            if result.failures:
                for failure in result.failures:
                    self.output_handler.error(str(failure))
                return exit_code_for(result.failures[0])
            return ExitCode.SUCCESS

        except ConfigNotFoundError as e:
            logger.error(str(e))
            self.output_handler.error(str(e))
            self.output_handler.print("Create it with at least the target space, for example:\n")
            self.output_handler.print("  space_key: DOCS")
            self.output_handler.print("  parent_page_title: Documentation\n")
            self.output_handler.print("Required environment variables:")
            self.output_handler.print("  CONFLUENCE_URL          - Your Confluence base URL")
            self.output_handler.print("  CONFLUENCE_API_TOKEN    - API token, password or personal access token")
            self.output_handler.print("  CONFLUENCE_USER         - User name (omit for personal access tokens)")
            return ExitCode.GENERAL_ERROR

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CONFLUENCE_URL, CONFLUENCE_USER and CONFLUENCE_API_TOKEN environment variables"
            )
            return ExitCode.AUTH_ERROR

        except PublishError as e:
            logger.error(f"Publish failed: {e}")
            self.output_handler.error(f"Publish failed: {e}")
            return exit_code_for(e)

        except PublisherError as e:
            logger.error(f"Invalid input: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (ConfluenceError, CLIError) as e:
            logger.error(f"Publish failed: {e}")
            self.output_handler.error(f"Error: {e}")
            return exit_code_for(e)

        except Exception as e:
            logger.exception("Unexpected error during publish")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _get_client(self, config: PublishConfig) -> ConfluenceApiClient:
        if self.client is None:
            if self.authenticator is None:
                self.authenticator = Authenticator()
            credentials = self.authenticator.get_credentials()

            session = requests.Session()
            session.verify = not config.skip_ssl_verification
            transport = HttpTransport(
                credentials.url,
                session,
                username=credentials.user,
                password=credentials.api_token,
                min_seconds_between_requests=config.min_seconds_between_requests,
                timeout=config.request_timeout,
            )
            self.client = ConfluenceApiClient(transport)
        return self.client
