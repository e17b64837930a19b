"""
Package Capacity

This is the CRITICAL domain object for preventing overbooking.
All admissions against a package MUST go through it.

A PackageCapacity is a snapshot of one package's capacity taken while the
package is locked: the configured maximum and the participants already
committed by capacity-holding bookings. Admission and release decisions are
made against that snapshot, and the lock keeps it valid until the
surrounding transaction commits.
"""

from dataclasses import dataclass

from shared.domain.base import ValueObject

from apps.bookings.domain.exceptions import CapacityExceeded, CapacityReleaseError


@dataclass(frozen=True)
class Reservation(ValueObject):
    """Proof that participants were admitted against a package snapshot"""
    package_id: int
    participants: int
    available_before: int

    @property
    def available_after(self) -> int:
        return self.available_before - self.participants


@dataclass
class PackageCapacity:
    """
    Capacity snapshot of a travel package

    Key invariants:
    - committed never exceeds max_participants through an admission
    - committed never drops below zero through a release

    The maximum belongs to the catalog and may be lowered below what is
    already committed; that blocks further admissions but never evicts
    existing bookings.
    """

    package_id: int
    max_participants: int
    committed: int = 0

    def __post_init__(self):
        if self.max_participants < 0:
            raise ValueError("Maximum participants cannot be negative")
        if self.committed < 0:
            raise ValueError("Committed participants cannot be negative")

    @property
    def available(self) -> int:
        """Free seats, never negative"""
        return max(self.max_participants - self.committed, 0)

    def can_admit(self, participants: int) -> bool:
        return 0 < participants <= self.available

    def admit(self, participants: int) -> Reservation:
        """
        Commit participants against this package

        Raises:
            CapacityExceeded: if the free seats cannot hold the request
        """
        if participants < 1:
            raise ValueError("Participants must be at least 1")
        if not self.can_admit(participants):
            raise CapacityExceeded(
                f"Not enough space available for package {self.package_id}: "
                f"requested {participants}, available {self.available}",
                package_id=self.package_id,
                requested=participants,
                available=self.available,
            )
        reservation = Reservation(
            package_id=self.package_id,
            participants=participants,
            available_before=self.available,
        )
        self.committed += participants
        return reservation

    def release(self, participants: int) -> int:
        """
        Return participants to the pool

        Returns the free seats after the release.
        Raises:
            CapacityReleaseError: if fewer participants are committed than released
        """
        if participants < 1:
            raise ValueError("Participants must be at least 1")
        if participants > self.committed:
            raise CapacityReleaseError(
                f"Cannot release {participants} participants from package {self.package_id}: "
                f"only {self.committed} committed",
                package_id=self.package_id,
                requested=participants,
                committed=self.committed,
            )
        self.committed -= participants
        return self.available

    def __str__(self):
        return f"PackageCapacity(package={self.package_id}, {self.committed}/{self.max_participants})"
