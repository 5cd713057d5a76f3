"""Prompt texts for site generation and code change requests."""

from __future__ import annotations

_CODE_CHANGE_TEMPLATE = """
Instruction from the user:
---
%s
---

Most relevant files currently in the project:
---
%s
---

Reply with the new or updated files, using this shape:
```json
[
  {"filename": "src/components/Hero.tsx", "type": "tsx", "content": "..."},
  {"filename": "src/components/Testimonials.tsx", "type": "tsx", "content": "..."}
]
```

List only files that were changed or added, each of them once. Leave out unchanged files.
"""

_CODE_CHANGE_SYSTEM_PROMPT = """
Task: update the code of an existing project.
Reply with nothing but the JSON array of changed or added files.
"""

_SITE_GENERATION_TEMPLATE = """
Task: generate a complete multi-file website project.

Project description supplied by the user:

---
"%s"
---

Follow these rules when building the project:

1. Framework: React with TypeScript, bundled by Vite.
2. Styling: TailwindCSS with one consistent theme:
   - primary colour #1A73E8
   - accent colour #FF6F61
   - background colour #F9FAFB
   - font Inter, sans-serif
3. Layout: a responsive grid; cards get soft shadows and rounded corners.
4. Motion: Framer Motion for gentle entry effects on buttons, cards and modals.
5. Files that must be present, at the least:
   - `index.tsx`: landing page with a hero section and feature highlights
   - `about.tsx`: a page describing the site or project
   - `components/Navbar.tsx` and `Footer.tsx`
   - `App.tsx`: routes and shared layout
   - `main.tsx`: application root
   - `tailwind.config.ts`: theme settings
   - `vite.config.ts`: standard Vite setup
   - `package.json`: every library and dependency the project uses
   - `index.html`: HTML entry point of the application

The package.json must list every library imported anywhere, vite.config.ts and
tailwind.config.ts included, with @vitejs/plugin-react and tailwindcss as dev dependencies.

Reply with a JSON array of files shaped like this:

```json
[
  {"filename": "src/App.tsx", "type": "tsx", "content": "..."},
  {"filename": "src/components/Navbar.tsx", "type": "tsx", "content": "..."},
  ...
]
```

Return code only, without commentary; the reply is parsed and written out as project files.
"""


def code_change_prompt(user_query: str, context_files: str) -> tuple[str, str]:
    """Return the user prompt and system prompt for a code change request."""
    return _CODE_CHANGE_TEMPLATE % (user_query, context_files), _CODE_CHANGE_SYSTEM_PROMPT


def site_generation_prompt() -> str:
    """Return the site generation template; it holds one ``%s`` for the description."""
    return _SITE_GENERATION_TEMPLATE