# mcproducts

This is the products service of a commerce platform. When it starts, it runs these steps in order:

1. It reads its own settings from a YAML file. The default is `config.yaml` in the working directory.
2. It checks the common service URL. It then connects to the common service over gRPC and pings it.
3. It fetches the shared configuration from the common service.
4. It fetches the translations and loads them into an in-process template store.
5. It serves the products gRPC API at the address that the shared configuration gives.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Configuration

The settings file holds a `service` section. All three keys must be present, and each must be a string:

```yaml
service:
  env: dev
  service_grpc_url: localhost:50052
  common_service_grpc_url: localhost:50051
```

`mcproducts.server.load_service_config(path)` raises `mcproducts.errors.InternalError` in two cases:

- the file cannot be read
- the file is not a valid configuration

Connecting to the common service raises `InternalError` in these cases:

- `common_service_grpc_url` is not a valid URL target (see `mcproducts.net.validate_url_target`)
- the connection fails
- the ping fails or times out (5 seconds)

The shared configuration supplies the products service address (`services.products_service_grpc_url`). It must be an IP socket address, such as `127.0.0.1:50052` or `[::1]:50052`. If it is not, `Controller.run` raises `InternalError`.

## Running

```
mcproducts
mcproducts --config path/to/config.yaml
```

The command runs `mcproducts.server.main`. It logs at debug level and serves until it is interrupted.

| Outcome | Exit status |
|---|---|
| The service is interrupted | 130 |
| A start-up step fails (it prints `Error: ...` to stderr) | 1 |

## Wire format

The package does not use protobuf. Messages are JSON objects, sent as the payload of gRPC unary calls.

- **Common service client.** `mcproducts.common.GrpcCommonServiceClient` calls these methods:
  - `/common.v1.CommonService/Ping`
  - `/common.v1.CommonService/ConfigGet`
  - `/common.v1.CommonService/TranslationsGet`
- **Products server.** It exposes `/products.v1.ProductsService/ProductCreate`.

To plug in another transport, implement the abstract `mcproducts.common.CommonServiceClient`. Pass an async connector (`url -> client`) to `Common.create` or `Server.create`.

## Library use

```python
from mcproducts.config import Config
from mcproducts.trans import TranslationElement, TranslationElements, tr, translations_init

with open("config.yaml") as fh:
    cfg = Config.from_yaml(fh.read())

translations_init(
    {"en": TranslationElements(trans=[TranslationElement(id="hello", tr="Hello {{ name }}")])},
    5,
)
print(tr("en", "hello", {"name": "world"}))  # Hello world
```

Translations are Jinja2 templates, and an undefined variable is an error. The store can be filled only once: a second call to `translations_init` raises `NotInitializedError`. `translations_reset()` empties the store. A template without parameters is returned as written.

`tr` raises a subclass of `TranslationError` in these cases:

- `NotInitializedError`: the store has not been set up.
- `KeyNotFoundError`: the language or the id is unknown.
- `MissingParamsError`: the template takes variables and no parameters were given.
- `RenderError`: the template failed to compile or render.

### Application errors

Application errors are `mcproducts.errors.AppError`.

- `AppError.create(ctx, where, id, tr_params, details, status_code, wrapped)` builds an error and translates its message from the store. It uses `ctx.accept_language` for the language. If there is no context or the translation fails, it falls back to the id.
- `error_string()` gives the combined text. If that text is longer than 1024 characters, it is cut to 1024 and `...` is appended.
- `to_message()` gives the `AppErrorMessage` wire form.
- `app_error_from_proto_app_error()` turns that form back into an `AppError`.

## What it does not do

The `ProductCreate` call accepts a request and returns an empty response. Nothing is created or stored, and the package has no product storage.

`Server.report_error` only prints queued errors to standard output, prefixed with `from here`.