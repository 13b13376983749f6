"""Prompts for the two generation turns: build a project, fix an error."""

from appforge.application.prompts.prompt_builder import PromptBuilder
from appforge.domain.models.extracted_file import ExtractedFile

GENERATION_ROLE = (
    "You are a senior software developer specializing in React and TypeScript. "
    "You generate complete, production-ready web applications from a short "
    "description."
)

GENERATION_CONSTRAINTS = """\
- Generate every file the application needs to install and run: index.html,
  package.json, the Vite config, src/main.jsx (or .tsx), src/App.jsx (or .tsx),
  src/index.css with Tailwind imports, postcss.config.js, tailwind.config.js.
- Put components in src/components/ and pages in src/pages/.
- Use functional components with hooks and React Router for routing.
- End every component file with an explicit "export default ComponentName;".
- Check imports, balanced brackets, and closed JSX tags before answering."""

FIX_ROLE = (
    "You are an expert debugger fixing errors in a generated web application."
)

FIX_CONSTRAINTS = """\
- Identify the root cause of the error before changing anything.
- Keep the original functionality and style of the code.
- Output the complete fixed file, never a fragment or a diff.
- Every React component keeps an explicit "export default ComponentName;"."""

OUTPUT_FORMAT = """\
Emit every file as one fenced code block whose opening fence carries the
file's path relative to the project root instead of a language name:

```src/components/Header.jsx
function Header() {
  return <header>My App</header>;
}

export default Header;
```

- One block per file, complete file content, no placeholders.
- Use forward slashes; never use absolute paths or "..".
- If a file itself contains ``` fences, open and close its block with
  four or more backticks.
- Explanatory prose may appear between blocks but never inside them."""


def build_generation_prompt(
    request: str,
    existing_files: list[ExtractedFile] | None = None,
    supports_system_prompt: bool = True,
) -> dict[str, str]:
    """Build the prompt pair for generating or updating a project.

    Args:
        request: The user's description of the app or change
        existing_files: Current project files to revise, if any
        supports_system_prompt: Whether the provider takes a system prompt

    Returns:
        dict with "system_prompt" and "user_prompt"
    """
    context = None
    if existing_files:
        context = (
            "The project already exists. Return only the files you add or "
            "change, each in full."
        )
    return (
        PromptBuilder()
        .with_role(GENERATION_ROLE)
        .with_constraints(GENERATION_CONSTRAINTS)
        .with_output_format(OUTPUT_FORMAT)
        .with_context(context)
        .with_current_files(existing_files)
        .with_task(request)
        .build(supports_system_prompt=supports_system_prompt)
    )


def build_fix_prompt(
    error_message: str,
    affected_path: str | None,
    code_context: list[ExtractedFile],
    supports_system_prompt: bool = True,
) -> dict[str, str]:
    """Build the prompt pair for fixing a runtime or build error.

    Args:
        error_message: Error text from the browser or dev server
        affected_path: File the error points at, if one could be identified
        code_context: Files shown to the model
        supports_system_prompt: Whether the provider takes a system prompt

    Returns:
        dict with "system_prompt" and "user_prompt"
    """
    if affected_path:
        location = f"The error most likely comes from {affected_path}."
    else:
        location = "The error location is unknown; the key project files are shown."

    task = (
        f"Fix this error:\n\n{error_message.strip()}\n\n{location}\n\n"
        "Explain the cause in one or two sentences, then output each fixed file."
    )
    return (
        PromptBuilder()
        .with_role(FIX_ROLE)
        .with_constraints(FIX_CONSTRAINTS)
        .with_output_format(OUTPUT_FORMAT)
        .with_current_files(code_context)
        .with_task(task)
        .build(supports_system_prompt=supports_system_prompt)
    )
