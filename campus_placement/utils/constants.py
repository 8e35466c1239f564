"""Common constants."""

# Student profile fields whose change revokes TnP verification
TRUST_SENSITIVE_FIELDS = frozenset(
    {
        "course",
        "college",
        "college_id",
        "cgpa",
        "year_of_completion",
        "registration_number",
        "tenth_marks",
        "twelfth_marks",
        "last_semester_marksheet",
        "profile_avatar",
    }
)

# Fields a student may edit on their own profile
STUDENT_EDITABLE_FIELDS = frozenset(
    {
        "full_name",
        "mobile_number",
        "profile_avatar",
        "course",
        "college_id",
        "cgpa",
        "backlogs",
        "year_of_completion",
        "registration_number",
        "tenth_marks",
        "twelfth_marks",
        "last_semester_marksheet",
        "area_of_interest",
    }
)

# Profile fields backed by NOT NULL columns
REQUIRED_PROFILE_FIELDS = frozenset({"full_name", "course", "college_id", "backlogs"})

# Fields a recruiter may change through a job edit
JOB_EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "company_name",
        "location",
        "job_type",
        "work_mode",
        "designation",
        "skills_required",
        "ctc_min",
        "ctc_max",
        "ctc_currency",
        "min_cgpa",
        "allowed_courses",
        "max_backlogs",
        "allowed_years",
        "application_deadline",
    }
)

JOB_TYPES = ["Full-time", "Internship", "Part-time"]
WORK_MODES = ["Work from Office", "Work from Home", "Hybrid"]
INTERVIEW_MODES = ["Online", "Offline", "Phone"]

MAX_RECRUITER_NOTES_LENGTH = 1000
DEFAULT_CURRENCY = "INR"
