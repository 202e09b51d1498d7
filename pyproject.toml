[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcproducts"
version = "0.1.11"
description = "Products service: loads its configuration, fetches shared settings and translations from the common service, and serves the products gRPC API."
requires-python = ">=3.10"
keywords = ["ecommerce", "products", "grpc", "microservice", "translations"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "grpcio>=1.60",
    "jinja2>=3.1",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
mcproducts = "mcproducts.server:main"

[tool.hatch.build.targets.wheel]
packages = ["mcproducts"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
