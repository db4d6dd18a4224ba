"""
Path-to-language classification.

Resolution order:
1. Special filenames (full lower-cased path, then lower-cased basename)
2. Extension after the last dot of the basename, lower-cased
3. "Unknown"

Some extensions belong to more than one ecosystem. Those are listed in
AMBIGUOUS_EXTENSIONS with their candidates in priority order; the first
candidate always wins. Linguist-style detectors disagree on these, so files
from the losing ecosystem are misclassified. No filename or content heuristics
are applied.
"""

from __future__ import annotations

from typing import Dict, List

from commit_stats.entities.commit import UNKNOWN_LANGUAGE

# extension -> candidate languages, highest priority first
AMBIGUOUS_EXTENSIONS: Dict[str, tuple[str, ...]] = {
    "m": ("MATLAB", "Objective-C"),
    "cs": ("C#", "C# (Unity)"),
    "h": ("C/C++", "Objective-C"),
    "s": ("Assembly",),
}

LANGUAGE_EXTENSIONS: Dict[str, str] = {
    # JavaScript/TypeScript
    "js": "JavaScript",
    "jsx": "JavaScript",
    "mjs": "JavaScript",
    "cjs": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    # Python
    "py": "Python",
    "pyx": "Python",
    "pyi": "Python",
    "pyc": "Python",
    # JVM
    "java": "Java",
    "kt": "Kotlin",
    "kts": "Kotlin",
    "scala": "Scala",
    "clj": "Clojure",
    "cljs": "ClojureScript",
    # C/C++
    "c": "C",
    "cpp": "C++",
    "cc": "C++",
    "cxx": "C++",
    "c++": "C++",
    "hpp": "C++",
    "hxx": "C++",
    # .NET
    "fs": "F#",
    "fsx": "F#",
    "vb": "Visual Basic",
    "xaml": "XAML",
    # Web
    "html": "HTML",
    "htm": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "Sass",
    "less": "Less",
    "vue": "Vue",
    "svelte": "Svelte",
    "coffee": "CoffeeScript",
    "litcoffee": "CoffeeScript",
    "ls": "LiveScript",
    "pug": "Pug",
    "jade": "Pug",
    "haml": "Haml",
    "slim": "Slim",
    # PHP / Ruby
    "php": "PHP",
    "phtml": "PHP",
    "rb": "Ruby",
    "rake": "Ruby",
    # Systems
    "go": "Go",
    "rs": "Rust",
    "swift": "Swift",
    "mm": "Objective-C++",
    "zig": "Zig",
    "odin": "Odin",
    "nim": "Nim",
    "crystal": "Crystal",
    "v": "V",
    "asm": "Assembly",
    "nasm": "Assembly",
    # Shell
    "sh": "Shell",
    "bash": "Shell",
    "zsh": "Shell",
    "fish": "Shell",
    "ps1": "PowerShell",
    "pwsh": "PowerShell",
    "nu": "Nushell",
    # Data / markup
    "sql": "SQL",
    "xml": "XML",
    "json": "JSON",
    "yaml": "YAML",
    "yml": "YAML",
    "toml": "TOML",
    "md": "Markdown",
    "mdx": "Markdown",
    "rst": "reStructuredText",
    "tex": "TeX",
    "bib": "BibTeX",
    "graphql": "GraphQL",
    "gql": "GraphQL",
    "proto": "Protocol Buffers",
    "thrift": "Thrift",
    # Config
    "ini": "INI",
    "cfg": "Config",
    "conf": "Config",
    "env": "Environment",
    "dockerfile": "Dockerfile",
    # Scripting
    "lua": "Lua",
    "pl": "Perl",
    "pm": "Perl",
    "r": "R",
    "vim": "Vim Script",
    "dart": "Dart",
    # Functional
    "hs": "Haskell",
    "erl": "Erlang",
    "ex": "Elixir",
    "exs": "Elixir",
    "ml": "OCaml",
    "mli": "OCaml",
    "elm": "Elm",
    "purs": "PureScript",
    "reason": "Reason",
    "re": "Reason",
    # Science
    "jl": "Julia",
    "mat": "MATLAB",
    "mathematica": "Mathematica",
    "nb": "Mathematica",
    # Games
    "gd": "GDScript",
    "gdscript": "GDScript",
    # Smart contracts
    "move": "Move",
    "sol": "Solidity",
    "cairo": "Cairo",
}

# Ambiguous extensions resolve to their first candidate
LANGUAGE_EXTENSIONS.update(
    {ext: candidates[0] for ext, candidates in AMBIGUOUS_EXTENSIONS.items()}
)

SPECIAL_FILENAMES: Dict[str, str] = {
    "dockerfile": "Dockerfile",
    "makefile": "Makefile",
    "rakefile": "Ruby",
    "gemfile": "Ruby",
    "podfile": "Ruby",
    "fastfile": "Ruby",
    "appfile": "Ruby",
    "deliverfile": "Ruby",
    "scanfile": "Ruby",
    "snapfile": "Ruby",
    "matchfile": "Ruby",
    "gymfile": "Ruby",
    "package.json": "JSON",
    "package-lock.json": "JSON",
    "yarn.lock": "YAML",
    "cargo.toml": "TOML",
    "cargo.lock": "TOML",
    "go.mod": "Go Module",
    "go.sum": "Go Module",
    "requirements.txt": "Text",
    "pipfile": "TOML",
    "pipfile.lock": "JSON",
    "poetry.lock": "TOML",
    "pyproject.toml": "TOML",
    "readme.md": "Markdown",
    "readme.txt": "Text",
    "readme": "Text",
    "license": "Text",
    "changelog.md": "Markdown",
    "changelog": "Text",
    ".gitignore": "Gitignore",
    ".gitattributes": "Gitattributes",
    ".editorconfig": "EditorConfig",
    ".eslintrc": "JSON",
    ".eslintrc.js": "JavaScript",
    ".eslintrc.json": "JSON",
    ".prettierrc": "JSON",
    ".prettierrc.js": "JavaScript",
    "tsconfig.json": "JSON",
    "webpack.config.js": "JavaScript",
    "rollup.config.js": "JavaScript",
    "vite.config.js": "JavaScript",
    "next.config.js": "JavaScript",
    "nuxt.config.js": "JavaScript",
}


def detect_language(path: str | None) -> str:
    """Return the language label for a repository-relative path."""
    if not path:
        return UNKNOWN_LANGUAGE

    lower_path = path.lower()
    if lower_path in SPECIAL_FILENAMES:
        return SPECIAL_FILENAMES[lower_path]

    basename = lower_path.rsplit("/", 1)[-1]
    if basename in SPECIAL_FILENAMES:
        return SPECIAL_FILENAMES[basename]

    dot = basename.rfind(".")
    if dot == -1:
        return UNKNOWN_LANGUAGE

    return LANGUAGE_EXTENSIONS.get(basename[dot + 1 :], UNKNOWN_LANGUAGE)


def get_supported_languages() -> List[str]:
    """Every label detect_language can return, excluding the sentinel."""
    labels = set(LANGUAGE_EXTENSIONS.values()) | set(SPECIAL_FILENAMES.values())
    return sorted(labels)
