from __future__ import annotations

import logging
from pathlib import Path

import pytest

from analyze import collect_module_records
from parse.ngmodule import (
    extract_module_name,
    extract_module_record,
    extract_ngmodule_array,
    extract_package_imports,
)
from rules.config import NgArchConfig

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "mini_app"
APP_DIR = FIXTURE_ROOT / "src" / "app"


def test_extract_module_record_reads_ngmodule_metadata() -> None:
    record = extract_module_record(APP_DIR / "app.module.ts", FIXTURE_ROOT)

    assert record.identity == "AppModule"
    assert record.origin_path == "src/app/app.module.ts"
    assert record.kind is None
    assert record.declared_dependencies == [
        "BrowserModule",
        "CoreModule",
        "SharedModule",
        "UsersModule",
        "RouterModule",
    ]
    assert record.declarations == ["AppComponent"]


def test_extract_module_record_keeps_providers_and_exports() -> None:
    core = extract_module_record(APP_DIR / "core" / "core.module.ts", FIXTURE_ROOT)
    shared = extract_module_record(
        APP_DIR / "shared" / "shared.module.ts", FIXTURE_ROOT
    )

    assert core.providers == [
        "AuthService",
        "{ provide: 'API_URL', useValue: '/api' }",
    ]
    assert shared.exports == ["ButtonComponent", "CommonModule"]
    assert shared.declared_dependencies == ["CommonModule", "UsersModule"]


def test_extract_module_record_adds_third_party_package_imports() -> None:
    record = extract_module_record(
        APP_DIR / "features" / "orders" / "orders.module.ts", FIXTURE_ROOT
    )

    assert record.declared_dependencies == ["CommonModule", "SharedModule", "lodash"]


def test_extract_ngmodule_array_ignores_comments_and_nesting() -> None:
    content = """
@NgModule({
  // imports: [CommentedOutModule],
  imports: [
    /* LegacyModule, */
    StoreModule.forFeature('users', [reducerA, reducerB]),
    ...SHARED_MODULES,
    FormsModule,
  ],
})
export class UsersModule {}
"""

    assert extract_ngmodule_array(content, "imports") == [
        "StoreModule",
        "SHARED_MODULES",
        "FormsModule",
    ]
    assert extract_ngmodule_array(content, "exports") == []


def test_extract_ngmodule_array_without_decorator_reads_whole_file() -> None:
    assert extract_ngmodule_array("const x = { imports: [AModule] };", "imports") == [
        "AModule"
    ]


def test_extract_package_imports_skips_relative_and_framework() -> None:
    content = """
import { NgModule } from '@angular/core';
import { Store } from "@ngrx/store";
import type { Config } from 'app-config';
import { Local } from './local';
import * as moment from 'moment';
"""

    assert extract_package_imports(content) == ["@ngrx/store", "app-config", "moment"]


def test_extract_module_name_falls_back_to_file_name() -> None:
    assert extract_module_name(Path("x/admin.module.ts"), "const a = 1;") == (
        "admin.module"
    )
    assert (
        extract_module_name(Path("x/a.module.ts"), "export class AdminModule {}")
        == "AdminModule"
    )


def test_collect_module_records_skips_unreadable_files(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    module_dir = tmp_path / "src" / "app"
    module_dir.mkdir(parents=True)
    (module_dir / "bad.module.ts").write_bytes(b"\xff\xfe")
    (module_dir / "good.module.ts").write_text(
        "@NgModule({ imports: [CommonModule] })\nexport class GoodModule {}\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="analyze"):
        records = collect_module_records(tmp_path, NgArchConfig())

    assert [record.identity for record in records] == ["GoodModule"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "bad.module.ts" in warnings[0].getMessage()
