"""Frame, header and per-atom data containers."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


@dataclass
class FrameHeader:
    """
    Metadata from the 9-line header of a simulation frame.

    Attributes:
        prebox_header: The two free-text lines preceding the box lengths.
        boxl: Box lengths (Lx, Ly, Lz).
        angles: Box angles (alpha, beta, gamma) in degrees.
        postbox_header: The two free-text lines following the box angles.
        natm_types: Number of distinct atom types.
        natms_per_type: Atom count for each type, in type order.
        masses_per_type: Mass for each type, in type order.
    """

    prebox_header: tuple[str, str]
    boxl: tuple[float, float, float]
    angles: tuple[float, float, float]
    postbox_header: tuple[str, str]
    natm_types: int
    natms_per_type: list[int]
    masses_per_type: list[float]

    def __post_init__(self) -> None:
        """Normalize sequences and check per-type lengths."""
        self.prebox_header = tuple(self.prebox_header)
        self.postbox_header = tuple(self.postbox_header)
        self.boxl = tuple(float(v) for v in self.boxl)
        self.angles = tuple(float(v) for v in self.angles)
        self.natms_per_type = [int(n) for n in self.natms_per_type]
        self.masses_per_type = [float(m) for m in self.masses_per_type]

        if len(self.prebox_header) != 2 or len(self.postbox_header) != 2:
            raise ValueError("prebox and postbox headers must hold 2 lines each")
        if len(self.boxl) != 3 or len(self.angles) != 3:
            raise ValueError("boxl and angles must hold 3 values each")
        if len(self.natms_per_type) != self.natm_types:
            raise ValueError(
                f"natms_per_type has {len(self.natms_per_type)} entries, "
                f"expected {self.natm_types}"
            )
        if len(self.masses_per_type) != self.natm_types:
            raise ValueError(
                f"masses_per_type has {len(self.masses_per_type)} entries, "
                f"expected {self.natm_types}"
            )

    @property
    def natoms(self) -> int:
        """Total number of atoms promised by the header."""
        return sum(self.natms_per_type)


@dataclass
class AtomDatum:
    """
    A single atom of a frame.

    The symbol string is created once per coordinate block and the same
    object is referenced by every atom of that block. Velocity components
    are either all set or all ``None``.
    """

    symbol: str
    x: float
    y: float
    z: float
    is_fixed: bool
    atom_id: int
    vx: float | None = None
    vy: float | None = None
    vz: float | None = None

    @property
    def has_velocity(self) -> bool:
        """True if all three velocity components are present."""
        return self.vx is not None and self.vy is not None and self.vz is not None

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def velocity(self) -> tuple[float, float, float] | None:
        if not self.has_velocity:
            return None
        return (self.vx, self.vy, self.vz)


@dataclass
class ConFrame:
    """
    A complete simulation frame: header plus atoms in file order.

    Atoms are grouped by type, in the type order of the header.

    Attributes:
        header: Frame metadata.
        atom_data: One entry per atom.
    """

    header: FrameHeader
    atom_data: list[AtomDatum] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.atom_data)

    def __repr__(self) -> str:
        return (
            f"ConFrame(cell={list(self.header.boxl)}, "
            f"angles={list(self.header.angles)}, natoms={len(self)}, "
            f"has_velocities={self.has_velocities()})"
        )

    def has_velocities(self) -> bool:
        """True if the first atom carries velocity data."""
        return bool(self.atom_data) and self.atom_data[0].has_velocity

    @property
    def natoms(self) -> int:
        """Number of atoms in the frame."""
        return len(self.atom_data)

    @property
    def cell(self) -> tuple[float, float, float]:
        return self.header.boxl

    @property
    def angles(self) -> tuple[float, float, float]:
        return self.header.angles

    def header_line(self, index: int) -> str:
        """
        Return one of the four free-text header lines.

        Args:
            index: 0 and 1 select the prebox lines, 2 and 3 the postbox lines.

        Raises:
            IndexError: If index is outside [0, 4).
        """
        if index < 0 or index >= 4:
            raise IndexError(f"Header line index {index} out of range [0, 4)")
        if index < 2:
            return self.header.prebox_header[index]
        return self.header.postbox_header[index - 2]

    @property
    def symbols(self) -> list[str]:
        """Chemical symbol of every atom."""
        return [atom.symbol for atom in self.atom_data]

    @property
    def positions(self) -> NDArray[np.floating]:
        """Atomic positions, shape (N, 3)."""
        return np.array(
            [(atom.x, atom.y, atom.z) for atom in self.atom_data],
            dtype=np.float64,
        ).reshape(-1, 3)

    @property
    def velocities(self) -> NDArray[np.floating] | None:
        """Atomic velocities, shape (N, 3), or None for position-only frames."""
        if not self.has_velocities():
            return None
        return np.array(
            [(atom.vx, atom.vy, atom.vz) for atom in self.atom_data],
            dtype=np.float64,
        ).reshape(-1, 3)

    @property
    def fixed(self) -> NDArray[np.bool_]:
        """Fixed flag of every atom."""
        return np.array([atom.is_fixed for atom in self.atom_data], dtype=bool)

    @property
    def atom_ids(self) -> NDArray[np.uint64]:
        """Identifier of every atom."""
        return np.array([atom.atom_id for atom in self.atom_data], dtype=np.uint64)

    @property
    def atom_masses(self) -> NDArray[np.floating]:
        """Per-atom mass, expanded from the per-type masses of the header."""
        return np.repeat(
            np.asarray(self.header.masses_per_type, dtype=np.float64),
            self.header.natms_per_type,
        )
