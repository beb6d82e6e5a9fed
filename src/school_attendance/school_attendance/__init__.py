"""School Attendance package.

Feature modules (students, class_schedules, attendance, users) each carry a
model, a repository interface, a MySQL repository and a service; Flask
controllers are a thin JSON layer on top.
"""
