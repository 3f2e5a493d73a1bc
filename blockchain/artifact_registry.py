"""
Artifact Registry
Resolves contract names to compiled Hardhat artifacts (ABI + bytecode)
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List
from loguru import logger

from deployer.errors import ResolutionError


@dataclass(frozen=True)
class ContractFactory:
    """Compiled contract blueprint, ready to be instantiated"""

    name: str
    abi: List[Dict]
    bytecode: str
    source_name: str
    artifact_path: str


class ArtifactRegistry:
    """
    Looks up build artifacts produced by `npx hardhat compile`

    Layout: artifacts/contracts/<File>.sol/<Name>.json, with a sibling
    <Name>.dbg.json and a build-info/ directory that are skipped.
    """

    def __init__(self, artifacts_dir: str = 'artifacts', project_root: str = '.'):
        """
        Initialize Artifact Registry

        Args:
            artifacts_dir: Hardhat artifacts directory
            project_root: Root that artifact `sourceName` paths are relative to
        """
        self.artifacts_dir = artifacts_dir
        self.project_root = project_root

    def resolve(self, name: str) -> ContractFactory:
        """
        Resolve a contract name to a constructible factory

        Args:
            name: Contract name, e.g. "VaultGateProtocol"

        Returns:
            ContractFactory

        Raises:
            ResolutionError: unknown name, ambiguous name, unreadable,
                undeployable or stale artifact
        """
        matches = self.find_artifacts(name)

        if not matches:
            raise ResolutionError(
                f"Artifact for contract '{name}' not found in {self.artifacts_dir}. "
                f"Run 'npx hardhat compile' first"
            )

        if len(matches) > 1:
            raise ResolutionError(
                f"Multiple artifacts found for contract '{name}': {', '.join(matches)}"
            )

        artifact_path = matches[0]
        artifact = self._load_artifact(artifact_path)

        abi = artifact.get('abi')
        bytecode = artifact.get('bytecode')

        if not isinstance(abi, list) or not isinstance(bytecode, str):
            raise ResolutionError(f"Artifact {artifact_path} has no abi/bytecode")

        if bytecode in ('', '0x'):
            raise ResolutionError(
                f"Contract '{name}' has no bytecode (abstract contract or interface?)"
            )

        # __$<hash>$__ (or __LibName__ on old solc) marks an unlinked library
        if '__' in bytecode:
            libraries = ', '.join(sorted(
                library
                for libs in artifact.get('linkReferences', {}).values()
                for library in libs
            )) or 'unknown'
            raise ResolutionError(
                f"Contract '{name}' has unlinked library references ({libraries}); "
                f"link them before deploying"
            )

        source_name = artifact.get('sourceName', '')
        self._check_fresh(name, artifact_path, source_name)

        logger.info(f"Resolved {name} from {artifact_path}")

        return ContractFactory(
            name=name,
            abi=abi,
            bytecode=bytecode,
            source_name=source_name,
            artifact_path=artifact_path
        )

    def find_artifacts(self, name: str) -> List[str]:
        """All artifact files named <name>.json, sorted"""
        if not os.path.isdir(self.artifacts_dir):
            return []

        target = f"{name}.json"
        matches = []

        for root, dirs, files in os.walk(self.artifacts_dir):
            # build-info holds compiler input/output, never contract artifacts
            dirs[:] = [d for d in dirs if d != 'build-info']
            if target in files:
                matches.append(os.path.join(root, target))

        return sorted(matches)

    def _load_artifact(self, artifact_path: str) -> Dict:
        try:
            with open(artifact_path, 'r') as f:
                artifact = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ResolutionError(f"Cannot read artifact {artifact_path}: {e}") from e

        if not isinstance(artifact, dict):
            raise ResolutionError(f"Artifact {artifact_path} is not a JSON object")

        return artifact

    def _check_fresh(self, name: str, artifact_path: str, source_name: str):
        """Source newer than its artifact means the build is stale"""
        if not source_name:
            return

        source_path = os.path.join(self.project_root, source_name)
        if not os.path.exists(source_path):
            logger.debug(f"Source {source_path} not found, skipping staleness check")
            return

        if os.path.getmtime(source_path) > os.path.getmtime(artifact_path):
            raise ResolutionError(
                f"Artifact for '{name}' is stale ({source_name} changed since last compile). "
                f"Run 'npx hardhat compile' first"
            )
