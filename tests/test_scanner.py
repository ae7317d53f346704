"""Unit tests for the wp-config constant scan and plugin option scan."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

from playground_blueprints.scanner import (
    scan_config_constants,
    scan_plugin_options,
    tokenize_php,
)
from playground_blueprints.site import SnapshotSite

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


def test_constant_scan_filters_database_settings() -> None:
    """Database connection constants never leave the site."""
    source = 'define("DB_NAME","x"); define("MY_FEATURE","1");'
    assert scan_config_constants(source) == {"MY_FEATURE": "1"}, (
        "expected DB_NAME to be filtered out"
    )


def test_constant_scan_reads_wp_config_layout() -> None:
    """Typical wp-config.php formatting, comments and quoting are handled."""
    source = dedent(
        """
        <?php
        // define( 'COMMENTED_OUT', 'no' );
        define( 'DB_PASSWORD', 'secret' );
        define( 'WP_ENVIRONMENT_TYPE', 'staging' );
        define( "GREETING", "it's \\"quoted\\"" );
        /* define( 'BLOCK_COMMENT', 'no' ); */
        define( 'WP_DEBUG', false );
        define( 'WP_MEMORY_LIMIT', '256M' );
        if ( ! defined( 'ABSPATH' ) ) {
            define( 'ABSPATH', __DIR__ . '/' );
        }
        """
    )

    constants = scan_config_constants(source)

    assert constants == {
        "WP_ENVIRONMENT_TYPE": "staging",
        "GREETING": 'it\'s "quoted"',
        "WP_MEMORY_LIMIT": "256M",
    }, f"expected only literal string constants, got {constants!r}"


def test_constant_scan_handles_missing_config() -> None:
    """A site without wp-config.php offers no constants."""
    assert scan_config_constants(None) == {}


def test_tokenizer_skips_comments_and_whitespace() -> None:
    """Only names, strings and punctuation survive tokenizing."""
    tokens = tokenize_php("define( 'A', /* x */ 'b' ); # tail")
    assert tokens == [
        ("name", "define"),
        ("other", "("),
        ("string", "'A'"),
        ("other", ","),
        ("string", "'b'"),
        ("other", ")"),
        ("other", ";"),
    ]


def _write(root: Path, relative: str, text: str) -> None:
    path = root / "wp-content" / "plugins" / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_option_scan_reports_plugin_options_with_values(tmp_path: Path) -> None:
    """Options read by a plugin's own PHP files are suggested when set."""
    _write(
        tmp_path,
        "shop/shop.php",
        dedent(
            """
            <?php
            $currency = get_option( 'shop_currency' );
            $layout = get_option("shop_layout");
            $empty = get_option( 'shop_empty' );
            $zero = get_option( 'shop_zero' );
            $name = get_option( 'blogname' );
            $internal = get_option( '_shop_secret' );
            $core = get_option( 'wp_user_roles' );
            $defaulted = get_option( 'shop_default', 'x' );
            """
        ),
    )
    _write(tmp_path, "shop/vendor/lib/lib.php", "<?php get_option( 'vendor_option' );")
    _write(tmp_path, "shop/readme.txt", "get_option( 'readme_option' )")
    _write(tmp_path, "other/other.php", "<?php get_option( 'other_option' );")
    site = SnapshotSite(
        {
            "options": {
                "active_plugins": ["shop/shop.php", "other/other.php"],
                "shop_currency": "EUR",
                "shop_layout": {"columns": 3},
                "shop_empty": "",
                "shop_zero": "0",
                "blogname": "Site",
                "_shop_secret": "hidden",
                "wp_user_roles": "roles",
                "shop_default": "set",
                "vendor_option": "nope",
                "readme_option": "nope",
                "other_option": "yes",
            }
        },
        wp_root=tmp_path,
    )

    options = scan_plugin_options(site, ignored={"other"})

    assert options == {
        "shop": {"shop_currency": "EUR", "shop_layout": '{"columns": 3}'}
    }, f"unexpected option suggestions: {options!r}"


def test_option_scan_skips_unreadable_files(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """Files that cannot be read are skipped without failing the scan."""
    _write(tmp_path, "shop/shop.php", "<?php get_option( 'shop_currency' );")
    site = SnapshotSite(
        {"options": {"active_plugins": ["shop/shop.php"], "shop_currency": "EUR"}},
        wp_root=tmp_path,
    )
    mocker.patch.object(site, "read_plugin_file", side_effect=PermissionError("denied"))

    assert scan_plugin_options(site) == {}, "expected unreadable file to be skipped"
