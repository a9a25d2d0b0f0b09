class EventKind:
    COURSE_VIEWED = "course_viewed"
    COURSE_MODULE_CREATED = "course_module_created"
    COURSE_MODULE_UPDATED = "course_module_updated"
    COURSE_MODULE_DELETED = "course_module_deleted"
    COURSE_DELETED = "course_deleted"

    @classmethod
    def from_event_name(cls, event_name: str) -> str:
        """Reduce a namespaced host event name to its kind.

        ``\\core\\event\\course_module_updated`` and ``course_module_updated``
        both give ``course_module_updated``.
        """
        return event_name.strip().replace("/", "\\").rsplit("\\", 1)[-1]
