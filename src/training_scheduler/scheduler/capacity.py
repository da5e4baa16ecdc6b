"""Classroom capacity estimation."""

import math

from ..constants import CAPACITY_OK_MAX, CAPACITY_WARNING_MAX
from ..models import (
    CapacityStatus,
    CapacityValidation,
    ClassroomRequirement,
    Course,
    SchedulingCriteria,
    Trainee,
)


class CapacityPlanner:
    """Estimates how many classrooms each location needs.

    The estimate is advisory: it sizes the classroom pool handed to the
    schedulers and drives pre-flight warnings, but packing may still fail
    or leave classrooms idle.
    """

    def classroom_capacity(self, criteria: SchedulingCriteria) -> dict[str, float]:
        """Get the hours one classroom offers over the planning horizon.

        Returns:
            Dictionary with 'classroom_hours_per_week',
            'classroom_hours_available' and 'classroom_user_hours_capacity'
        """
        hours_per_week = criteria.days_per_week * criteria.daily_hours
        hours_available = hours_per_week * criteria.total_weeks
        return {
            "classroom_hours_per_week": hours_per_week,
            "classroom_hours_available": hours_available,
            "classroom_user_hours_capacity": hours_available * criteria.max_attendees,
        }

    def classrooms_needed(
        self,
        total_training_hours: float,
        criteria: SchedulingCriteria,
        location: str = "",
    ) -> ClassroomRequirement:
        """Estimate the classrooms needed for a trainee-hour demand.

        One classroom absorbs weeks × days × daily hours of demand. The
        demand is scaled by the contingency factor before dividing.

        Args:
            total_training_hours: Sum over trainees of required course hours
            criteria: Scheduling criteria
            location: Location name recorded on the requirement

        Returns:
            ClassroomRequirement; number_of_classrooms is at least 1 when
            the capacity is valid and 0 when it cannot be computed
        """
        capacity = self.classroom_capacity(criteria)
        contingency = criteria.contingency or 1.0
        adjusted_hours = total_training_hours * contingency
        hours_available = capacity["classroom_hours_available"]

        if hours_available <= 0:
            return ClassroomRequirement(
                number_of_classrooms=0,
                total_training_hours=adjusted_hours,
                raw_training_hours=total_training_hours,
                contingency_factor=contingency,
                is_valid=False,
                location=location,
                **capacity,
            )

        return ClassroomRequirement(
            number_of_classrooms=max(1, math.ceil(adjusted_hours / hours_available)),
            total_training_hours=adjusted_hours,
            raw_training_hours=total_training_hours,
            contingency_factor=contingency,
            is_valid=True,
            location=location,
            **capacity,
        )

    def validate_capacity(
        self,
        number_of_classrooms: int,
        available_classrooms: int | None = None,
    ) -> CapacityValidation:
        """Classify a classroom requirement.

        Args:
            number_of_classrooms: Estimated classrooms needed
            available_classrooms: Classrooms actually available, if known

        Returns:
            CapacityValidation with status ok (≤5), warning (6-10) or
            error (>10, zero, or more than available)
        """
        if number_of_classrooms <= 0:
            return CapacityValidation(
                status=CapacityStatus.ERROR,
                message="Unable to calculate classroom requirements",
                required_classrooms=number_of_classrooms,
                available_classrooms=available_classrooms,
            )

        if available_classrooms is not None and number_of_classrooms > available_classrooms:
            return CapacityValidation(
                status=CapacityStatus.ERROR,
                message=(
                    f"Requires {number_of_classrooms} classrooms but only "
                    f"{available_classrooms} available"
                ),
                required_classrooms=number_of_classrooms,
                available_classrooms=available_classrooms,
            )

        if number_of_classrooms > CAPACITY_WARNING_MAX:
            status = CapacityStatus.ERROR
            message = f"Excessive classroom requirement: {number_of_classrooms} classrooms needed"
        elif number_of_classrooms > CAPACITY_OK_MAX:
            status = CapacityStatus.WARNING
            message = f"High classroom requirement: {number_of_classrooms} classrooms needed"
        else:
            status = CapacityStatus.OK
            message = f"{number_of_classrooms} classrooms required"

        return CapacityValidation(
            status=status,
            message=message,
            required_classrooms=number_of_classrooms,
            available_classrooms=available_classrooms,
        )


def total_training_hours(trainees: list[Trainee], courses: dict[str, Course]) -> float:
    """Sum of course hours over every trainee's known required courses."""
    return sum(
        courses[course_id].duration_hours
        for trainee in trainees
        for course_id in dict.fromkeys(trainee.course_ids)
        if course_id in courses
    )
