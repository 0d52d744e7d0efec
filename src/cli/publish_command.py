"""Publish command orchestration for CLI.

PublishCommand loads the configuration, wires the Confluence client, the
markdown converter, the file mapper and the mermaid renderer into a
Publisher, runs it, and maps the outcome to an exit code.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    ConversionError,
    InvalidCredentialsError,
    SyncError,
)
from src.content_converter.markdown_converter import MarkdownConverter
from src.diagram_renderer.mermaid_renderer import MermaidRenderer
from src.file_mapper.config_loader import DEFAULT_CONFIG_PATH, ConfigLoader
from src.file_mapper.errors import ConfigError, FileMapperError
from src.file_mapper.file_mapper import FileMapper
from src.file_mapper.models import PublishConfig
from src.publisher.errors import PublisherError
from src.publisher.publisher import Publisher

logger = logging.getLogger(__name__)


class PublishCommand:
    """Runs one publish of the configured folder.

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> exit_code = PublishCommand(output_handler=output).run()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        publisher: Optional[Publisher] = None,
    ):
        """Initialize publish command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for Confluence API (optional)
            publisher: Pre-built Publisher (optional, built from config otherwise)
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.publisher = publisher

    def run(self, file: Optional[str] = None) -> ExitCode:
        """Publish every document, or only ``file`` if given.

        Args:
            file: Optional path of the only document to publish

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            publish_filter = os.path.abspath(file) if file else None

            if self.publisher is None:
                self.publisher = self._build_publisher(self._load_config())

            if publish_filter:
                self.output_handler.info(f"Publishing only {publish_filter}")

            with self.output_handler.spinner("Publishing pages to Confluence..."):
                outcome = self.publisher.do_publish(publish_filter)

            self.output_handler.print_publish_summary(outcome)

            if outcome.failed_files:
                for failure in outcome.failed_files:
                    logger.error(f"Failed to publish {failure.file_name}: {failure.reason}")
                return ExitCode.PUBLISH_FAILURES
            return ExitCode.SUCCESS

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CONFLUENCE_USER and CONFLUENCE_API_TOKEN environment variables"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except PublisherError as e:
            logger.error(f"Publish aborted: {e}")
            self.output_handler.error(f"Publish aborted: {e}")
            return ExitCode.GENERAL_ERROR

        except (ConversionError, FileMapperError, CLIError, SyncError) as e:
            logger.error(f"Error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during publish")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _load_config(self) -> PublishConfig:
        logger.info(f"Loading configuration from {self.config_path}")
        if not Path(self.config_path).exists():
            self.output_handler.print("No publish configuration found.\n")
            self.output_handler.print(f"Create {self.config_path} with:\n")
            self.output_handler.print("  confluence_base_url: https://company.atlassian.net")
            self.output_handler.print("  parent_page_id: \"123456\"")
            self.output_handler.print("  local_path: ./docs\n")
            self.output_handler.print("Required environment variables:")
            self.output_handler.print("  CONFLUENCE_URL          - Your Confluence base URL")
            self.output_handler.print("  CONFLUENCE_USER         - Your email address")
            self.output_handler.print("  CONFLUENCE_API_TOKEN    - API token from Atlassian\n")
            raise ConfigNotFoundError(self.config_path)
        return ConfigLoader.load(self.config_path)

    def _build_publisher(self, config: PublishConfig) -> Publisher:
        if not self.authenticator:
            self.authenticator = Authenticator()

        api = APIWrapper(self.authenticator)
        file_mapper = FileMapper(config, MarkdownConverter())
        renderer = MermaidRenderer.from_config(config.mermaid)
        return Publisher(file_mapper, config, api, renderer)
