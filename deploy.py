import os
import subprocess
import sys

ENV_CONFIG = {
    "devel": {"stack_name": "ReviewStore-devel", "env_file": ".env.devel"},
    "prod": {"stack_name": "ReviewStore", "env_file": ".env"},
}

# stack parameter -> key in the env file
PARAMETERS = {
    "GhOwner": "GH_OWNER",
    "GhRepo": "GH_REPO",
    "GhBranch": "GH_BRANCH",
    "GhToken": "GH_TOKEN",
    "AdminPin": "ADMIN_PIN",
    "AllowedOrigins": "ALLOWED_ORIGINS",
}


def check_docker():
    """`sam build --use-container` needs a running Docker daemon."""
    try:
        subprocess.run(
            "docker info",
            shell=True,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except subprocess.CalledProcessError:
        print("Error: Docker is not running. Start it and try again.")
        sys.exit(1)


def load_env(env_file):
    env_vars = {}
    if os.path.exists(env_file):
        print(f"--- Loading variables from: {env_file} ---")
        with open(env_file, "r") as f:
            for line in f:
                if line.strip() and not line.strip().startswith("#"):
                    try:
                        key, value = line.strip().split("=", 1)
                        env_vars[key] = value
                    except ValueError:
                        continue
    else:
        print(f"WARNING: {env_file} not found!")
    return env_vars


def build_overrides(target_env, env_vars):
    overrides = [f"Env={target_env}"]
    for param, key in PARAMETERS.items():
        if key == "GH_BRANCH" and key not in env_vars:
            continue
        overrides.append(f"{param}={env_vars[key]}")
    return overrides


def deploy(target_env):
    config = ENV_CONFIG.get(target_env)
    env_vars = load_env(config["env_file"])
    try:
        overrides = build_overrides(target_env, env_vars)
        _build_and_deploy(overrides, target_env, config["stack_name"])
    except KeyError as e:
        print(f"Error: variable {e} missing from {config['env_file']}")
    except subprocess.CalledProcessError as e:
        print(f"Error while running SAM: {e}")


def _build_and_deploy(overrides, target_env, stack_name):
    check_docker()
    overrides_str = " ".join(overrides)

    print(f"--- Building for {target_env} ---")
    build_cmd = "sam build --use-container --cached --parallel"
    subprocess.run(build_cmd, shell=True, check=True)

    print(f"--- Deploying stack: {stack_name} ---")

    cmd = (
        f"sam deploy "
        f"--stack-name {stack_name} "
        f"--parameter-overrides {overrides_str} "
        f"--resolve-s3 "
        f"--capabilities CAPABILITY_IAM"
    )

    subprocess.run(cmd, shell=True, check=True)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python deploy.py [devel|prod]")
        sys.exit(1)

    target = sys.argv[1].lower()

    if target not in ENV_CONFIG:
        print("Invalid environment. Use 'devel' or 'prod'.")
        sys.exit(1)

    deploy(target)
