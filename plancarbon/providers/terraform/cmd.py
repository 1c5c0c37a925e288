from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from plancarbon.config import Config
from plancarbon.errors import ProviderAuthError, TerraformError

from .install import install_terraform
from .plan import Plan

log = logging.getLogger(__name__)

# what providers print on stderr when plan cannot authenticate
AUTH_ERROR_MARKERS = (
    "invalid authentication credentials",
    "No credentials loaded",
    "no valid credential",
)


@dataclass
class CmdOptions:
    terraform_dir: str
    terraform_binary: str = "terraform"
    no_color: bool = False


def _format_cmd(binary: str, args: Sequence[str]) -> str:
    return " ".join([shlex.quote(binary), *(shlex.quote(a) for a in args)])


def _log_running_cmd(binary: str, args: Sequence[str], no_color: bool) -> None:
    msg = f"Running command: {_format_cmd(binary, args)}"
    if no_color:
        log.info(msg)
    else:
        # bright black (dim gray)
        log.info("\x1b[90m%s\x1b[0m", msg)


def find_terraform(config: Config) -> str:
    """Path of the terraform binary, installing it when it cannot be found."""
    found = shutil.which(config.terraform_binary)
    if found:
        return found
    installed = Path(config.terraform_install_dir or ".") / "terraform"
    if installed.is_file() and os.access(installed, os.X_OK):
        return str(installed)
    log.warning("%s not found, installing terraform in %s", config.terraform_binary, installed.parent)
    return install_terraform(config.terraform_version or None, config.terraform_install_dir)


def terraform_cmd(options: CmdOptions, *args: str) -> bytes:
    """
    Run a terraform subcommand in the given directory, streaming stderr to the logger.
    Non-zero exit -> TerraformError carrying everything terraform wrote on stderr.
    """
    cmdline = [options.terraform_binary, *args]
    _log_running_cmd(options.terraform_binary, args, options.no_color)

    try:
        proc = subprocess.Popen(
            cmdline,
            cwd=options.terraform_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=1,  # line-buffer stderr reader
            text=True,  # decode to str for streaming
        )
    except OSError as e:
        raise TerraformError(f"cannot run {options.terraform_binary}: {e}") from e

    stderr_lines: List[str] = []

    # Stream stderr lines to logger as they arrive.
    def _pump_stderr(p: subprocess.Popen) -> None:
        assert p.stderr is not None
        for line in p.stderr:
            line = line.rstrip("\n")
            stderr_lines.append(line)
            log.error(line)

    t = threading.Thread(target=_pump_stderr, args=(proc,), daemon=True)
    t.start()

    stdout_str = ""
    if proc.stdout is not None:
        try:
            stdout_str = proc.stdout.read()
        finally:
            proc.stdout.close()

    proc.wait()
    t.join()

    if proc.returncode != 0:
        stderr = "\n".join(stderr_lines)
        raise TerraformError(
            f"{_format_cmd(options.terraform_binary, args)} exited with status {proc.returncode}",
            stderr=stderr,
        )
    return stdout_str.encode("utf-8", errors="replace")


def _is_auth_error(stderr: str) -> bool:
    return any(marker in stderr for marker in AUTH_ERROR_MARKERS)


def _version(opts: CmdOptions) -> str:
    out = terraform_cmd(opts, "-version").decode("utf-8", errors="replace")
    return out.splitlines()[0] if out.strip() else ""


def terraform_version(config: Config) -> str:
    """First line of `terraform -version`, e.g. "Terraform v1.6.2"."""
    return _version(CmdOptions(terraform_dir=".", terraform_binary=find_terraform(config), no_color=config.no_color))


# ---------------- Plan helpers ----------------

def load_plan_json(path: Union[str, Path]) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def generate_plan_json(tfdir: str, config: Config, plan_path: Optional[str] = None) -> bytes:
    """
    - If plan_path is empty:
        terraform init
        terraform validate
        terraform plan -input=false -lock=false -out=<tmpdir>/plan.tfplan
        terraform show -json <tmpdir>/plan.tfplan
      The temp directory is removed after 'show'.
    - Else:
        terraform show -json <plan_path>
    """
    opts = CmdOptions(
        terraform_dir=tfdir,
        terraform_binary=find_terraform(config),
        no_color=config.no_color,
    )
    log.debug("Using %s", _version(opts) or opts.terraform_binary)

    if plan_path:
        return terraform_cmd(opts, "show", "-json", plan_path)

    terraform_cmd(opts, "init", "-input=false")
    terraform_cmd(opts, "validate")
    with tempfile.TemporaryDirectory(prefix="plancarbon") as tmp:
        plan_file = os.path.join(tmp, "plan.tfplan")
        try:
            terraform_cmd(opts, "plan", "-input=false", "-lock=false", f"-out={plan_file}")
        except TerraformError as e:
            if _is_auth_error(e.stderr):
                raise ProviderAuthError(f"terraform could not authenticate to the provider: {e}", stderr=e.stderr) from e
            raise
        return terraform_cmd(opts, "show", "-json", plan_file)


def get_plan(path: Union[str, Path], config: Config) -> Plan:
    """
    A terraform directory is planned, a .json file is read as it is, any other
    file is taken as a saved plan of the directory it lives in.
    """
    p = Path(path)
    if p.is_dir():
        return Plan.from_json(generate_plan_json(str(p), config))
    if p.suffix.lower() == ".json":
        log.debug("Reading plan JSON %s", p)
        return Plan.from_json(load_plan_json(p))
    return Plan.from_json(generate_plan_json(str(p.parent), config, plan_path=p.name))
