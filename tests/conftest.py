from pathlib import Path

import pytest

from review_context.models import ReviewComment, Severity


UTILS_TS = """export interface User {
  id: string;
  name: string;
}

export type UserId = string;

export function formatUser(user: User): string {
  return `${user.name} (${user.id})`;
}

const internalHelper = () => 42;

export enum Role {
  Admin,
  Member,
}
"""

SERVICE_TS = """import { formatUser, User } from "./utils";
import * as path from "path";
import lodash from "lodash";

export class UserService {
  describe(user: User): string {
    return formatUser(user);
  }
}
"""

INDEX_TS = """export { UserService } from "./service";
export * from "./utils";
"""

APP_TSX = """import { UserService } from "./service";
import React from "react";

export const App = () => <div>{new UserService().describe({ id: "1", name: "a" })}</div>;
"""

LEGACY_JS = """const helpers = require("./helpers");

function legacy() {
  return helpers.run();
}

module.exports = { legacy };
"""

BROKEN_TS = """export function (a b {
"""


@pytest.fixture
def make_repo(tmp_path):
    """Return a factory that writes ``{relative path: content}`` into a fresh repo dir."""
    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for relative_path, content in files.items():
            path = root / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root
    return _make


@pytest.fixture
def sample_repo(make_repo):
    """A small TypeScript project plus excluded and broken files."""
    return make_repo({
        "src/utils.ts": UTILS_TS,
        "src/service.ts": SERVICE_TS,
        "src/index.ts": INDEX_TS,
        "src/app.tsx": APP_TSX,
        "src/broken.ts": BROKEN_TS,
        "lib/legacy.js": LEGACY_JS,
        "node_modules/pkg/index.js": "export const pkg = 1;\n",
        "dist/bundle.js": "export const bundled = 1;\n",
        ".cache/hidden.ts": "export const hidden = 1;\n",
        "README.md": "# sample\n",
    })


@pytest.fixture
def make_comment():
    """Return a factory for review comments with sensible defaults."""
    def _make(**overrides) -> ReviewComment:
        data = {
            "file": "a.ts",
            "line": 1,
            "severity": Severity.MAJOR,
            "smell": "missing-guard",
            "rationale": "The id parameter is never validated",
            "suggestion": "Validate the id parameter before using it",
        }
        data.update(overrides)
        return ReviewComment(**data)
    return _make
