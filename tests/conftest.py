"""
Shared test fixtures and utilities for the htmldsl test suite.
"""

import pytest

from htmldsl.core.config import GlobalConfig
from htmldsl.parsing.html_parser import parse_html

CONTRACT_TEMPLATE = """
<html>
  <head>
    <meta name="timezone" content="Asia/Tokyo">
  </head>
  <body>
    <section data-page="contracts as contract">
      <p>{{ contract.customer:string }}</p>
      <table>
        <tbody>
          <tr data-repeat="contract.items as item">
            <td>{{ item.name:string }}</td>
            <td>{{ item.price:integer | comma }}</td>
          </tr>
        </tbody>
      </table>
    </section>
  </body>
</html>
"""

CONTRACT_DATA = {
    "contracts": [
        {
            "customer": "株式会社サンプル",
            "items": [
                {"name": "A", "price": 1000},
                {"name": "B", "price": 2000},
            ],
        }
    ]
}


@pytest.fixture
def contract_template() -> str:
    """Page/repeat template with nested aliases."""
    return CONTRACT_TEMPLATE


@pytest.fixture
def contract_data() -> dict:
    """Data satisfying the contract template."""
    return CONTRACT_DATA


@pytest.fixture
def contract_tree():
    """Parsed contract template."""
    return parse_html(CONTRACT_TEMPLATE)


@pytest.fixture
def utc_config() -> GlobalConfig:
    """Default global configuration."""
    return GlobalConfig()

