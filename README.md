# containercompose

Bring up and tear down the services described in a `docker-compose.yaml`
file using the `container` command-line tool.

## Installation

```
pip install .
```

The `container` tool must be on your `PATH`. Services that publish ports
also need `socat`, which forwards each host port to the container, and
`lsof` and `kill`, which are used to stop those forwarders when shutting
down.

## Usage

Start every service in `./docker-compose.yaml`:

```
container-compose up
```

Use a different compose file with `-f` / `--file`:

```
container-compose --file path/to/compose.yaml up
```

Stop and remove containers and the port forwarders:

```
container-compose down
```

Show the version:

```
container-compose --version
```

Running `container-compose` with no subcommand prints the help text. When
something goes wrong (an unreadable compose file, a failing `container`
command, a bad port number) the command prints `error: ...` to standard
error and exits with status 1.

### What `up` does

For each service, a container is started with
`container run --name NAME -e KEY=VALUE ... --mount ... -d IMAGE [COMMAND...]`.
Containers are always started detached. If the service lists ports, the
container is inspected and one background `socat` is started per port,
forwarding `TCP-LISTEN:HOST_PORT` to the container's first network address
at the container port. The process id of each `socat` is printed.

### What `down` does

`down` stops and removes **every** container that `container ls` reports,
not only those of the compose file. It then reads the compose file and, for
each host port of each service, kills the process that `lsof -ti :PORT`
reports as holding it.

## Compose file

A compose file has a `version` and a `services` mapping. Every service must
have `image`, `ports`, `environment` and `volumes`; `name` and `command` are
optional. All values are read as text, so `version: 3` and `version: "3"`
are the same.

```yaml
version: "3"
services:
  web:
    name: my-web
    image: nginx:latest
    ports:
      - "8080:80"
    environment:
      - MODE=production
    volumes:
      - ./html:/usr/share/nginx/html
    command: ["nginx", "-g", "daemon off;"]
```

- `name`: when missing, the service key is used as the container name.
- `ports`: a list of `HOST:CONTAINER` strings.
- `environment`: a mapping, or a list of `KEY=value` strings.
- `volumes`: a list of `source:target` strings. A source directory that
  does not exist is created before it is bind-mounted by its absolute path.
- `command`: a list of arguments, or a single string. A string is split
  once, at its first space, into at most two arguments. A command of just
  `""` runs `echo "No command provided"` instead.

## Library use

```python
from containercompose.compose import load_compose_file
from containercompose.runner import ServiceContainer

compose = load_compose_file("docker-compose.yaml")
for key, service in compose.services.items():
    container = ServiceContainer.from_service(service.name or key, service)
    print(container.build_run_args())
```

Note that `build_run_args()` creates missing volume source directories.

- `containercompose.compose`: `parse_compose`, `load_compose_file`,
  `parse_service`, `parse_environment`, `parse_volumes`, `parse_command`,
  the `Compose` and `Service` dataclasses, and `ComposeError`.
- `containercompose.containers`: `get_containers_list`, `stop_containers`,
  `remove_containers`, `parse_containers`, `parse_container`, the
  `Container` description classes, and `ContainerError`.
- `containercompose.runner`: `ServiceContainer` (`from_service`,
  `build_run_args`, `run`, `expose_service_ports`), `split_port`,
  `run_services` and `stop_and_remove_services`.

## Limitations

- `up` accepts `-d` / `--detach` and a list of service names, but ignores
  both: every service is started, always detached.
- Ports are not mapped by the container tool itself; they are forwarded by
  `socat` processes, which `down` finds again only through `lsof`.
- Only `image`, `name`, `ports`, `environment`, `volumes` and `command` of a
  service are used. Networks, dependencies, build sections and other compose
  keys are not supported.