"""Per-category tables for prompting and document layout."""

from __future__ import annotations

from ..models import Category

# Order categories by importance in generated documents.
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.SCHEMA,
    Category.ROUTER,
    Category.SERVICE,
    Category.HOOK,
    Category.COMPONENT,
    Category.UTIL,
    Category.TYPE,
    Category.CONFIG,
    Category.TEST,
    Category.OTHER,
)

CATEGORY_LABELS: dict[Category, str] = {
    Category.SCHEMA: "Database Schemas",
    Category.ROUTER: "API Routes & Endpoints",
    Category.SERVICE: "Services & Business Logic",
    Category.HOOK: "Hooks",
    Category.COMPONENT: "Components",
    Category.UTIL: "Utilities",
    Category.TYPE: "Type Definitions",
    Category.CONFIG: "Configuration",
    Category.TEST: "Tests",
    Category.OTHER: "Other Files",
}

CATEGORY_ICONS: dict[Category, str] = {
    Category.SCHEMA: "📊",
    Category.ROUTER: "🛤️",
    Category.SERVICE: "⚙️",
    Category.HOOK: "🪝",
    Category.COMPONENT: "🧩",
    Category.UTIL: "🔧",
    Category.TYPE: "📝",
    Category.CONFIG: "🛠️",
    Category.TEST: "🧪",
    Category.OTHER: "📄",
}

CATEGORY_INSTRUCTIONS: dict[Category, str] = {
    Category.SCHEMA: (
        "This is a DATABASE SCHEMA file. Output the COMPLETE schema verbatim including:\n"
        "- All models/tables with ALL fields and types\n"
        "- All relations and foreign keys\n"
        "- All indexes and constraints\n"
        "- Enums and custom types\n"
        "This is critical reference material - do not summarize, include everything."
    ),
    Category.ROUTER: (
        "This is a ROUTER/API file. Document EVERY endpoint:\n"
        "- HTTP method and path (or procedure name for tRPC)\n"
        "- Input type/validation (Zod schema, body params, query params)\n"
        "- Output type\n"
        "- One-line description of what it does\n"
        "- Any middleware or auth requirements"
    ),
    Category.COMPONENT: (
        "This is a COMPONENT file. Document:\n"
        "- Props interface (full type if complex)\n"
        "- Key state and what triggers re-renders\n"
        "- Data fetching (queries, mutations, API calls)\n"
        "- Important event handlers\n"
        "- Child components it renders (just names)"
    ),
    Category.HOOK: (
        "This is a HOOK file. Document:\n"
        "- Parameters and their types\n"
        "- Return value type and shape\n"
        "- Side effects (API calls, subscriptions, localStorage)\n"
        "- Dependencies that trigger re-runs"
    ),
    Category.UTIL: (
        "This is a UTILITY file. For each exported function:\n"
        "- Function signature (name, params, return type)\n"
        "- One-line description\n"
        "- Edge cases or important behavior"
    ),
    Category.SERVICE: (
        "This is a SERVICE/BUSINESS LOGIC file. Document:\n"
        "- Class or module purpose\n"
        "- Public methods with signatures\n"
        "- External dependencies (APIs, databases)\n"
        "- Key business rules implemented"
    ),
    Category.CONFIG: (
        "This is a CONFIG file. Document:\n"
        "- What it configures\n"
        "- Environment variables used\n"
        "- Default values and their implications\n"
        "- How to override settings"
    ),
    Category.TYPE: (
        "This is a TYPE DEFINITION file. Include VERBATIM:\n"
        "- All exported interfaces and types\n"
        "- Important JSDoc comments\n"
        "- Generic constraints\n"
        "This is reference material - keep full definitions."
    ),
    Category.TEST: (
        "This is a TEST file. Briefly note:\n"
        "- What module/component it tests\n"
        "- Key test scenarios covered\n"
        "- Any test utilities defined here"
    ),
    Category.OTHER: (
        "Analyze this file and document:\n"
        "- Its purpose in the codebase\n"
        "- Key exports and their signatures\n"
        "- How other files would use this"
    ),
}

CATEGORY_TEMPLATES: dict[Category, str] = {
    Category.SCHEMA: "**Schema:**\n```\n[FULL SCHEMA HERE - DO NOT SUMMARIZE]\n```",
    Category.ROUTER: (
        "**Endpoints:**\n"
        "| Method | Path | Input | Output | Description |\n"
        "|--------|------|-------|--------|-------------|\n"
        "| ... | ... | ... | ... | ... |"
    ),
    Category.COMPONENT: (
        "**Props:** `{ prop1: Type, prop2?: Type }`\n"
        "**State:** [key state variables]\n"
        "**Data:** [queries/mutations used]\n"
        "**Renders:** [key child components]"
    ),
    Category.HOOK: (
        "**Signature:** `useHookName(param: Type): ReturnType`\n"
        "**Returns:** [shape of return value]\n"
        "**Effects:** [side effects]"
    ),
    Category.UTIL: (
        "**Exports:**\n"
        "- `functionName(params): Return` - description\n"
        "- `anotherFunction(params): Return` - description"
    ),
    Category.SERVICE: (
        "**Methods:**\n"
        "- `methodName(params): Return` - description\n"
        "**Depends on:** [external services/APIs]"
    ),
    Category.CONFIG: (
        "**Configures:** [what system]\n"
        "**Env vars:** `VAR_NAME`, `OTHER_VAR`\n"
        "**Defaults:** [important defaults]"
    ),
    Category.TYPE: "**Types:**\n```typescript\n[FULL TYPE DEFINITIONS]\n```",
    Category.TEST: "**Tests:** [module name]\n**Scenarios:** [key test cases]",
    Category.OTHER: "**Exports:**\n- [list key exports with brief descriptions]",
}


__all__ = [
    "CATEGORY_ICONS",
    "CATEGORY_INSTRUCTIONS",
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "CATEGORY_TEMPLATES",
]
