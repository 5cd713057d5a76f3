# walrus_sitegen

An HTTP service that turns a plain-language project description into a
multi-file React + TypeScript (Vite, TailwindCSS) site. It then builds the
site and publishes it to Walrus Sites.

A request goes through these steps:

1. The description is sent to an OpenAI chat model with a fixed
   site-generation prompt. If the first call fails with an error that looks
   transient, the service waits 2 seconds and tries once more, this time
   asking for a JSON reply.
2. The model's JSON reply is parsed into files. It may be a bare array, a
   single file object, or an array wrapped under one of the keys `files`,
   `result`, `code`, `data` or `output`. A surrounding ```` ```json ````
   fence is removed first. The files are written under `tmp/`. JSON files
   that parse are re-indented with two spaces and sorted keys.
3. `npm install` and then `npm run build` run in `tmp/`.
4. `site-builder --config sites-config.yaml publish tmp/dist --epochs 2` runs
   in the current directory. The site object ID is taken from the first
   `New site object ID: ` line of its output.

## Running

```
walrus-sitegen
```

On start the command does the following:

- It loads `.env` from the current directory if the file exists. Variables
  that are already set are kept.
- It reads `config.yaml` (or `config.yml`) from the current directory.
  Keys in the file are matched regardless of case.
- Any environment variable that is set and not empty overrides the file.

The server listens on `SERVER_ADDRESS`, given as `host:port`. An empty host
means all interfaces. If the address is not set, the server uses port 80.
It stops cleanly on SIGINT or SIGTERM and waits up to 10 seconds for the
shutdown to finish.

`APP_ENV=production` only suppresses the "Running in debug mode" log line. The
Flask application is not run in debug mode either way.

## Configuration

| Key | Meaning |
| --- | --- |
| `SERVER_ADDRESS` | Address to listen on, e.g. `:8080` |
| `OPENAI_API_KEY` | API key for the OpenAI API |
| `EMBEDDING_MODEL_ID` | Embedding model used by `Generator.generate_embedding` |
| `SITE_BUILDER_PATH` | Path to the `site-builder` executable |
| `WALRUS_CLI_PATH` | Path to the `walrus` executable (stored, not run) |
| `SEAL_API_KEY`, `SEAL_ENDPOINT` | Seal access-control service |
| `SUI_RPC_ENDPOINT` | Sui RPC URL. A warning is logged if it is missing |
| `SUI_NETWORK` | Network name, e.g. `testnet` |
| `SUI_SITE_DEPLOYED_EVENT_TYPE` | Full event type string |
| `SUINS_CONTRACT_ADDRESS`, `SUINS_NFT_TYPE` | SUINS settings |
| `NEO4J_URI`, `NEO4J_USER`, `NEO4J_PASSWORD` | Graph database settings |

All of these are read into `walrus_sitegen.config.Config` by `load_config`.
If the config file cannot be read or a value is not a scalar, `load_config`
raises `ConfigError`.

Example `.env`:

```
SERVER_ADDRESS=:8080
OPENAI_API_KEY=placeholder
SITE_BUILDER_PATH=/usr/local/bin/site-builder
WALRUS_CLI_PATH=/usr/local/bin/walrus
SUI_NETWORK=testnet
```

## HTTP API

### `POST /project/generate`

Request body (both fields required, non-empty strings):

```json
{"prompt": "A landing page for a coffee shop", "wallet": "0xabc123"}
```

On success the service returns `201 Created`:

```json
{"projectID": "…uuid…", "cid": "0x…site object id…"}
```

The possible errors are:

- `400` with `{"error": "Invalid request body: …"}` for a malformed or
  incomplete body.
- `500` with `{"error": "Failed to generate site"}` if generation fails.
- `500` with `{"error": "Failed to deploy project to Walrus"}` if deployment
  fails.

### `GET /health`

Returns `{"status": "ok"}`.

## Library use

- `walrus_sitegen.generator.Generator` wraps the model service. It has these
  methods:
  - `generate_site_and_store`
  - `generate_code_changes`
  - `generate_embedding`
  - `generate_with_context`

  The module also has `clean_llm_output`, `parse_generated_files` and
  `parse_code_changes`. Failures raise `GenerationError`.
- `walrus_sitegen.openai_client.OpenAIClient` is a small httpx client for the
  chat completion and embedding endpoints. Error responses raise `APIError`.
- `walrus_sitegen.walrus.Deployer.deploy_files` runs the build and publish
  steps. Failures raise `DeployError`. `extract_site_object_id` reads the ID
  from site-builder output.
- `walrus_sitegen.seal.SealClient` registers policies (`register_policy`) and
  checks access (`verify_access`) against a Seal endpoint. Failures raise
  `SealError`.
- `walrus_sitegen.storage.save_files_to_disk` writes `GeneratedFile` objects
  (`walrus_sitegen.models`) under a root directory.
- `walrus_sitegen.prompts` holds the prompt texts.
- `walrus_sitegen.utils` holds `determine_file_type` and `should_retry`.
- `walrus_sitegen.api.create_app` builds the Flask application around an
  `APIHandler`. `walrus_sitegen.app.build_app` wires one up from a `Config`.

## What it does not do

- No retrieval store is connected. `save_to_rag` stores nothing and reports
  zero files and embeddings. The Neo4j settings are read but not used.
- The server has no endpoints for querying or refining a project, for SUINS
  registration, or for access checks. Only `/project/generate` and `/health`
  exist.
- `SealClient` is not used by the server.
- No Sui events are listened to.
- No WAL tokens are obtained.
- Every generated project is written to the same `tmp/` directory, so
  concurrent requests share it.