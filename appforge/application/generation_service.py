"""Generation turn orchestration.

One turn: build prompts, get the model reply from a provider, extract the
file set, resolve repeated paths, and write the files into the workspace.
The extraction engine itself stays pure; everything with side effects
lives here.
"""

import logging
from pathlib import Path

from appforge.application.prompts import (
    build_fix_prompt,
    build_generation_prompt,
    collect_code_context,
    find_affected_path,
)
from appforge.application.workspace_writer import write_files
from appforge.domain.duplicates import DuplicatePolicy, resolve_duplicates
from appforge.domain.events import GenerationEventEmitter, GenerationEventType
from appforge.domain.extraction import extract_result
from appforge.domain.models.extracted_file import ExtractedFile
from appforge.domain.models.extraction_result import ExtractionStatus
from appforge.domain.models.generation_outcome import GenerationOutcome, GenerationStatus
from appforge.domain.providers.ai_provider import AIProvider

logger = logging.getLogger(__name__)

PROMPT_FILE_NAME = "generation-prompt.md"
RESPONSE_FILE_NAME = "generation-response.md"


class GenerationService:
    """Runs generation and fix turns against one provider."""

    def __init__(
        self,
        provider: AIProvider,
        *,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.LAST,
        event_emitter: GenerationEventEmitter | None = None,
        connection_timeout: int | None = None,
        response_timeout: int | None = None,
    ) -> None:
        self._provider = provider
        self._duplicate_policy = duplicate_policy
        self._events = event_emitter or GenerationEventEmitter()
        self._connection_timeout = connection_timeout
        self._response_timeout = response_timeout

    def generate(
        self,
        request: str,
        workspace_dir: Path,
        *,
        existing_files: list[ExtractedFile] | None = None,
        clean: bool = False,
        prompt_path: Path | None = None,
    ) -> GenerationOutcome:
        """Generate (or update) a project from a description.

        Args:
            request: The user's description of the app or change
            workspace_dir: Project directory to write into
            existing_files: Current files, shown to the model for updates
            clean: Empty the workspace before writing
            prompt_path: Where a manual provider's prompt goes
                (default: <workspace>/../generation-prompt.md)

        Returns:
            GenerationOutcome

        Raises:
            ProviderError: If the provider call fails
            ValueError: If the reply is blank, a path is invalid, or the
                duplicate policy rejects the file set
        """
        if not request or not request.strip():
            raise ValueError("Generation request cannot be empty")

        prompts = build_generation_prompt(
            request,
            existing_files=existing_files,
            supports_system_prompt=self._supports_system_prompt(),
        )
        return self._run_turn(prompts, workspace_dir, clean=clean, prompt_path=prompt_path)

    def fix(
        self,
        error_message: str,
        workspace_dir: Path,
        *,
        prompt_path: Path | None = None,
    ) -> GenerationOutcome:
        """Ask the model to fix an error in an existing workspace.

        Never cleans the workspace: only the files the model returns are
        rewritten.
        """
        if not error_message or not error_message.strip():
            raise ValueError("Error message cannot be empty")

        candidate = find_affected_path(error_message)
        affected_path, code_context = collect_code_context(Path(workspace_dir), candidate)
        logger.info(f"Fixing error; affected file: {affected_path or 'unknown'}")

        prompts = build_fix_prompt(
            error_message,
            affected_path,
            code_context,
            supports_system_prompt=self._supports_system_prompt(),
        )
        return self._run_turn(prompts, workspace_dir, clean=False, prompt_path=prompt_path)

    def process_response(
        self,
        raw: str,
        workspace_dir: Path,
        *,
        clean: bool = False,
    ) -> GenerationOutcome:
        """Extract files from a reply and write them into the workspace.

        Args:
            raw: Full reply text
            workspace_dir: Project directory to write into
            clean: Empty the workspace before writing (only if files were found)

        Returns:
            GenerationOutcome with status COMPLETED or NO_FILES

        Raises:
            ValueError: If the reply is blank, a path is invalid, or the
                duplicate policy rejects the file set
        """
        if not raw or not raw.strip():
            raise ValueError("Response content cannot be empty or whitespace only")

        result = extract_result(raw)
        for issue in result.issues:
            logger.warning(f"Skipped malformed candidate (line {issue.line}): {issue.message}")

        if not result.files:
            logger.info(f"No files found in reply (status={result.status.value})")
            self._events.emit_type(
                GenerationEventType.GENERATION_EMPTY, status=result.status.value
            )
            return GenerationOutcome(status=GenerationStatus.NO_FILES, extraction=result)

        for f in result.files:
            self._events.emit_type(GenerationEventType.FILE_EXTRACTED, path=f.path)

        files = resolve_duplicates(result.files, self._duplicate_policy)
        written = write_files(Path(workspace_dir), files, clean=clean)

        for f in files:
            self._events.emit_type(GenerationEventType.FILE_WRITTEN, path=f.path)
        self._events.emit_type(
            GenerationEventType.GENERATION_COMPLETED,
            files=len(files),
            strategy=result.strategy.value if result.strategy else None,
        )

        if result.status == ExtractionStatus.MALFORMED:
            logger.warning(f"Wrote a partial file set: {len(result.issues)} candidate(s) skipped")

        return GenerationOutcome(
            status=GenerationStatus.COMPLETED,
            extraction=result,
            files=files,
            written_paths=written,
        )

    def _run_turn(
        self,
        prompts: dict[str, str],
        workspace_dir: Path,
        *,
        clean: bool,
        prompt_path: Path | None,
    ) -> GenerationOutcome:
        workspace_dir = Path(workspace_dir)
        self._provider.validate()

        reply = self._provider.generate(
            prompts["user_prompt"],
            system_prompt=prompts["system_prompt"] or None,
            connection_timeout=self._connection_timeout,
            response_timeout=self._response_timeout,
        )

        if reply is None:
            return self._await_manual_response(prompts, workspace_dir, prompt_path)

        self._events.emit_type(GenerationEventType.RESPONSE_RECEIVED, characters=len(reply))
        return self.process_response(reply, workspace_dir, clean=clean)

    def _await_manual_response(
        self,
        prompts: dict[str, str],
        workspace_dir: Path,
        prompt_path: Path | None,
    ) -> GenerationOutcome:
        prompt_path = prompt_path or workspace_dir.parent / PROMPT_FILE_NAME
        prompt_path.parent.mkdir(parents=True, exist_ok=True)

        sections = [s for s in (prompts["system_prompt"], prompts["user_prompt"]) if s]
        prompt_path.write_text("\n\n".join(sections) + "\n", encoding="utf-8")

        response_path = prompt_path.with_name(RESPONSE_FILE_NAME)
        self._events.emit_type(GenerationEventType.PROMPT_WRITTEN, path=str(prompt_path))
        logger.info(f"Prompt written to {prompt_path}; awaiting reply at {response_path}")

        return GenerationOutcome(
            status=GenerationStatus.AWAITING_RESPONSE,
            prompt_path=prompt_path,
            response_path=response_path,
        )

    def _supports_system_prompt(self) -> bool:
        return bool(self._provider.get_metadata().get("supports_system_prompt", False))
