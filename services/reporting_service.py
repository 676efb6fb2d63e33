"""
Reporting service for the Student Records API
Derived statistics over mark and attendance rows

Everything here is computed from rows that were already fetched; nothing
touches the store. Values keep full precision and are only rounded by
``ReportingService.present`` when a response is built.
"""

from models.attendance import AttendanceStatus

class ReportingService:
    """Aggregations for dashboards and analytics"""

    @staticmethod
    def present(value, places=2):
        """Round a statistic for output; None stays None"""
        if value is None:
            return None
        return round(float(value), places)

    @staticmethod
    def _mean(values):
        values = list(values)
        if not values:
            return None
        return sum(values) / len(values)

    # Marks

    @staticmethod
    def average_marks(marks):
        """Mean of mark values, or None when there are no rows"""
        return ReportingService._mean(mark.marks for mark in marks)

    @staticmethod
    def student_averages(marks):
        """Per-student averages as [(student_id, average)] in first-seen order"""
        grouped = {}
        for mark in marks:
            grouped.setdefault(mark.student_id, []).append(mark.marks)
        return [(student_id, sum(values) / len(values)) for student_id, values in grouped.items()]

    @staticmethod
    def class_average(averages):
        """Mean of per-student averages, so every student weighs the same"""
        mean = ReportingService._mean(average for _, average in averages)
        return 0 if mean is None else mean

    @staticmethod
    def rank_by_average(averages):
        # sorted() is stable, ties keep first-seen order
        return sorted(averages, key=lambda item: item[1], reverse=True)

    @staticmethod
    def top_performers(averages, limit=5):
        return ReportingService.rank_by_average(averages)[:limit]

    @staticmethod
    def weak_students(averages, threshold=40):
        """Every student whose average is strictly below the threshold"""
        return [item for item in ReportingService.rank_by_average(averages) if item[1] < threshold]

    @staticmethod
    def subject_averages(marks, subjects_by_id):
        """Average marks per subject as [(subject, average)]

        Subjects missing from ``subjects_by_id`` are left out.
        """
        grouped = {}
        for mark in marks:
            grouped.setdefault(mark.subject_id, []).append(mark.marks)

        results = []
        for subject_id, values in grouped.items():
            subject = subjects_by_id.get(subject_id)
            if subject is None:
                continue
            results.append((subject, sum(values) / len(values)))
        return results

    # Attendance

    @staticmethod
    def _is_present(record):
        return record.status == AttendanceStatus.PRESENT

    @staticmethod
    def attendance_summary(records):
        """Total days, present days and percentage; 0% when there are no rows"""
        total = len(records)
        present = sum(1 for record in records if ReportingService._is_present(record))
        percentage = (present / total) * 100 if total else 0
        return {
            'total_days': total,
            'present_days': present,
            'percentage': percentage
        }

    @staticmethod
    def attendance_percentage(records):
        return ReportingService.attendance_summary(records)['percentage']

    @staticmethod
    def attendance_percentages(records):
        """Per-student attendance percentage as [(student_id, percentage)]"""
        grouped = {}
        for record in records:
            grouped.setdefault(record.student_id, []).append(record)
        return [
            (student_id, ReportingService.attendance_percentage(rows))
            for student_id, rows in grouped.items()
        ]

    @staticmethod
    def low_attendance(percentages, threshold=75):
        """Students whose attendance is strictly below the threshold"""
        return [item for item in percentages if item[1] < threshold]
