from prometheus_client import Counter


appointments_booked_total = Counter(
    "wellbee_appointments_booked_total",
    "Total appointments booked",
)

appointment_bookings_rejected_total = Counter(
    "wellbee_appointment_bookings_rejected_total",
    "Booking attempts rejected by availability checks",
    ["reason"],
)

appointment_status_changes_total = Counter(
    "wellbee_appointment_status_changes_total",
    "Appointment status transitions applied",
    ["status"],
)

video_calls_started_total = Counter(
    "wellbee_video_calls_started_total",
    "Video calls started (new meeting links assigned)",
)

video_room_fallbacks_total = Counter(
    "wellbee_video_room_fallbacks_total",
    "Meeting links served from the fallback public room",
)
