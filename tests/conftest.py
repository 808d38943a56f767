# tests/conftest.py
import pytest


@pytest.fixture
def sample_html() -> str:
    return """
    <html>
      <head>
        <title>  Acme Cloud Platform </title>
        <meta name="description" content="Acme builds developer tools.">
        <meta name="keywords" content="Tooling, DevOps">
        <style>
          body { font-family: "Helvetica Neue", Arial, sans-serif; color: #ffffff; }
          .brand { color: #FF5733; background: rgb(16, 32, 48); }
          .muted { color: hsl(210, 50%, 40%); }
        </style>
      </head>
      <body><h1>Welcome</h1><p>Our platform ships a public api.</p></body>
    </html>
    """
