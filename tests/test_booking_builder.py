import pytest

from studiobook.domain.booking.builder import MEMBER_UNAVAILABLE, WizardStep
from studiobook.domain.booking.errors import EventFieldScope, FieldScope, GlobalScope
from studiobook.exceptions import DraftStateError
from studiobook.notifications import NotificationLevel
from studiobook.schemas import ApiResult, CreateProjectRequest

EVENT_DATE = "2026-03-01"


def fill_project(builder):
    builder.update_project(projectName="Spring Campaign", color="#ff8800", description="Lookbook shoot")


async def open_events_step(builder):
    await builder.open()
    fill_project(builder)
    assert await builder.next_step() is True
    await builder.update_event(0, name="Day one", date=EVENT_DATE, location="Studio A")


async def ready_to_submit(builder):
    await open_events_step(builder)
    builder.select_member("m1")
    assert builder.add_team_member() is True


# --- Step 1 ---


@pytest.mark.asyncio
async def test_blank_project_name_blocks_step_one(builder, member_service, project_service):
    await builder.open()
    builder.update_project(projectName="", color="#ff8800", description="Lookbook shoot")

    assert await builder.next_step() is False

    assert builder.errors.get(FieldScope("projectName")) == "Project name is required"
    assert builder.step == WizardStep.PROJECT
    member_service.get_available_members.assert_not_called()
    project_service.create_project.assert_not_called()


@pytest.mark.asyncio
async def test_all_required_project_fields_reported(builder):
    assert await builder.next_step() is False
    assert builder.errors.field_errors() == {
        "projectName": "Project name is required",
        "color": "Color is required",
        "description": "Description is required",
    }


@pytest.mark.asyncio
async def test_client_block_validated_only_when_enabled(builder):
    fill_project(builder)
    builder.update_client(name="Dana", email="not-an-email", mobile="12-34")
    assert builder.validate_project_step() is True

    builder.set_client_enabled(True)
    assert builder.validate_project_step() is False
    assert builder.errors.get(FieldScope("clientEmail")) == "Please enter a valid email address"
    assert builder.errors.get(FieldScope("clientMobile")) == "Please enter a valid mobile number"

    builder.update_client(email="dana@example.com", mobile="+1 (555) 010-2030")
    assert builder.errors.get(FieldScope("clientEmail")) is None
    assert builder.validate_project_step() is True


@pytest.mark.asyncio
async def test_missing_client_fields(builder):
    fill_project(builder)
    builder.set_client_enabled(True)

    assert builder.validate_project_step() is False
    assert builder.errors.get(FieldScope("clientName")) == "Client name is required"
    assert builder.errors.get(FieldScope("clientEmail")) == "Client email is required"
    assert builder.errors.get(FieldScope("clientMobile")) == "Client mobile is required"


def test_correcting_a_field_clears_its_error(builder):
    builder.validate_project_step()
    assert FieldScope("color") in builder.errors

    builder.update_project(color="#000000")
    assert FieldScope("color") not in builder.errors
    assert FieldScope("projectName") in builder.errors


def test_unknown_project_field_raises(builder):
    with pytest.raises(DraftStateError):
        builder.update_project(budget="100")


@pytest.mark.asyncio
async def test_previous_step_keeps_draft(builder):
    await open_events_step(builder)
    builder.previous_step()

    assert builder.step == WizardStep.PROJECT
    assert builder.draft.projectName == "Spring Campaign"
    assert builder.events[0].location == "Studio A"


# --- Events ---


@pytest.mark.asyncio
async def test_raising_start_hour_pushes_end_hour(builder):
    event = builder.events[0]
    assert (event.startHour, event.endHour) == (9, 10)

    await builder.update_event(0, startHour=10)
    assert (event.startHour, event.endHour) == (10, 11)

    assert builder.end_hour_options() == list(range(11, 25))
    assert builder.start_hour_options() == list(range(0, 24))


@pytest.mark.asyncio
async def test_start_hour_below_end_hour_keeps_end_hour(builder):
    await builder.update_event(0, endHour=17)
    await builder.update_event(0, startHour=12)

    assert (builder.events[0].startHour, builder.events[0].endHour) == (12, 17)


@pytest.mark.asyncio
async def test_end_hour_not_after_start_is_rejected(builder):
    with pytest.raises(DraftStateError):
        await builder.update_event(0, endHour=9)
    with pytest.raises(DraftStateError):
        await builder.update_event(0, startHour=24)


@pytest.mark.asyncio
async def test_rejected_hour_change_leaves_event_untouched(builder, member_service):
    await open_events_step(builder)
    event = builder.events[0]
    calls = member_service.get_available_members.await_count

    with pytest.raises(DraftStateError):
        await builder.update_event(0, startHour=12, endHour=11)
    with pytest.raises(DraftStateError):
        await builder.update_event(0, startHour=14, endHour=25)

    assert (event.startHour, event.endHour) == (9, 10)
    assert event.startHour < event.endHour
    assert member_service.get_available_members.await_count == calls


@pytest.mark.asyncio
async def test_window_change_refetches_availability(builder, member_service):
    await open_events_step(builder)
    assert member_service.get_available_members.await_count == 1

    await builder.update_event(0, location="Studio B")
    assert member_service.get_available_members.await_count == 1

    await builder.update_event(0, startHour=13)
    assert member_service.get_available_members.await_count == 2
    _, start, end = member_service.get_available_members.call_args.args
    assert (start, end) == (13, 14)


def test_removing_the_only_event_is_rejected(builder, notifier):
    only = builder.events[0]

    assert builder.remove_event(0) is False

    assert builder.events == [only]
    assert notifier.last.level == NotificationLevel.WARNING
    assert notifier.last.message == "At least one event is required"


def test_add_event_selects_it(builder):
    added = builder.add_event()

    assert len(builder.events) == 2
    assert builder.selected_index == 1
    assert builder.selected_event is added
    assert added.reminders.weekBefore is True and added.reminders.dayBefore is True


def test_remove_event_clamps_selection(builder):
    builder.add_event()
    builder.add_event()
    assert builder.selected_index == 2

    assert builder.remove_event(1) is True
    assert builder.selected_index == 1

    builder.select_event(0)
    assert builder.remove_event(1) is True
    assert builder.selected_index == 0
    assert len(builder.events) == 1

    assert builder.remove_event(0) is False
    assert len(builder.events) == 1


def test_remove_event_reindexes_errors(builder):
    builder.add_event()
    builder.add_event()
    builder.validate_events()
    assert builder.errors.event_indexes_with_errors() == [0, 1, 2]

    builder.events[2].name = "Day three"
    builder.validate_events()
    builder.remove_event(1)

    assert builder.errors.event_indexes_with_errors() == [0, 1]
    assert builder.errors.get(EventFieldScope(1, "name")) is None
    assert builder.errors.get(EventFieldScope(1, "location")) == "Location is required"


def test_select_event_out_of_range_raises(builder):
    with pytest.raises(DraftStateError):
        builder.select_event(3)


# --- Team staging ---


@pytest.mark.asyncio
async def test_unavailable_member_is_listed_but_cannot_be_added(builder):
    await open_events_step(builder)

    options = {o.member.id: o for o in builder.member_options()}
    assert options["m3"].disabled is True
    assert options["m1"].disabled is False
    assert options["m2"].flagged is True

    builder.select_member("m3")
    assert builder.add_blocked_reason == MEMBER_UNAVAILABLE
    assert builder.add_team_member() is False
    assert builder.selected_event.assignments == []


@pytest.mark.asyncio
async def test_select_member_fills_default_role(builder):
    await open_events_step(builder)

    builder.select_member("m1")
    assert builder.current_member.roleId == "r1"

    # No roleId on Bob, resolved by his role name
    builder.select_member("m2")
    assert builder.current_member.roleId == "r2"

    builder.set_member_role("r3")
    assert builder.current_member.roleId == "r3"


@pytest.mark.asyncio
async def test_added_member_leaves_the_option_list(builder):
    await open_events_step(builder)
    builder.select_member("m2")
    builder.set_member_instructions("Bring the drone")

    assert builder.add_team_member() is True

    assignment = builder.selected_event.assignments[0]
    assert (assignment.memberId, assignment.roleId) == ("m2", "r2")
    assert assignment.memberName == "Bob"
    assert assignment.roleName == "Videographer"
    assert assignment.instructions == "Bring the drone"
    assert "m2" not in [o.member.id for o in builder.member_options()]
    assert builder.current_member.memberId is None


@pytest.mark.asyncio
async def test_add_blocked_without_selection_or_while_loading(builder):
    await open_events_step(builder)
    assert builder.add_blocked_reason == "Select a member and role"

    builder.select_member("m1")
    builder.availability.is_loading = True
    assert builder.can_add_team_member() is False


@pytest.mark.asyncio
async def test_remove_member_and_edit_instructions(builder):
    await ready_to_submit(builder)

    builder.update_assignment_instructions("m1", "Arrive at 8")
    assert builder.selected_event.assignments[0].instructions == "Arrive at 8"

    assert builder.remove_team_member("m1") is True
    assert builder.remove_team_member("m1") is False
    with pytest.raises(DraftStateError):
        builder.update_assignment_instructions("m1", "gone")


@pytest.mark.asyncio
async def test_each_event_keeps_its_own_assignments(builder):
    await ready_to_submit(builder)
    builder.add_event()
    await builder.update_event(1, name="Day two", date="2026-03-02", location="Studio B")

    assert builder.selected_event.assignments == []
    assert [o.member.id for o in builder.member_options()] == ["m1", "m2", "m3"]
    assert builder.events[0].assignments[0].memberId == "m1"


def test_role_name_falls_back_to_id(builder):
    assert builder.role_name("missing-role") == "missing-role"


# --- Submit ---


@pytest.mark.asyncio
async def test_event_errors_are_scoped_and_block_submit(builder, project_service, notifier):
    await builder.open()
    fill_project(builder)
    await builder.next_step()

    result = await builder.submit()

    assert result.success is False
    project_service.create_project.assert_not_called()
    assert builder.errors.event_indexes_with_errors() == [0]
    assert builder.errors.as_dict() == {
        "event-0-name": "Event name is required",
        "event-0-date": "Event date is required",
        "event-0-location": "Location is required",
        "event-0-assignments": "At least one team member is required",
    }
    assert notifier.last.level == NotificationLevel.ERROR


@pytest.mark.asyncio
async def test_submit_sends_flattened_events_and_resets(builder, project_service, notifier):
    await ready_to_submit(builder)
    builder.set_client_enabled(True)
    builder.update_client(name="Dana", email="dana@example.com", mobile="555 010 2030")
    on_created = builder.on_created

    result = await builder.submit()

    assert result.success is True
    request = project_service.create_project.call_args.args[0]
    assert isinstance(request, CreateProjectRequest)
    payload = request.model_dump(exclude_none=True)
    assert payload["companyId"] == "company-1"
    assert payload["client"]["email"] == "dana@example.com"
    assert payload["events"] == [
        {
            "name": "Day one",
            "date": EVENT_DATE,
            "startHour": 9,
            "endHour": 10,
            "location": "Studio A",
            "reminders": {"weekBefore": True, "dayBefore": True},
            "assignments": [{"memberId": "m1", "roleId": "r1", "instructions": ""}],
        }
    ]

    on_created.assert_called_once_with({"id": "new-project-id"})
    assert notifier.last.level == NotificationLevel.SUCCESS
    assert builder.is_open is False
    assert builder.step == WizardStep.PROJECT
    assert len(builder.events) == 1
    assert builder.events[0].assignments == []
    assert builder.client_enabled is False


@pytest.mark.asyncio
async def test_client_left_out_when_toggle_off(builder, project_service):
    await ready_to_submit(builder)
    builder.update_client(name="Dana", email="dana@example.com", mobile="555 010 2030")

    await builder.submit()

    request = project_service.create_project.call_args.args[0]
    assert request.client is None
    assert "client" not in request.model_dump(exclude_none=True)


@pytest.mark.asyncio
async def test_failed_submit_preserves_draft(builder, project_service, notifier):
    project_service.create_project.return_value = ApiResult.failure("date is locked", status_code=409)
    await ready_to_submit(builder)
    draft_before = builder.draft.model_dump()

    result = await builder.submit()

    assert result.success is False
    assert builder.draft.model_dump() == draft_before
    assert builder.submit_error == "date is locked"
    assert builder.errors.get(GlobalScope()) == "date is locked"
    assert builder.is_submitting is False
    assert builder.is_open is True
    assert notifier.last.level == NotificationLevel.ERROR
    builder.on_created.assert_not_called()


@pytest.mark.asyncio
async def test_submit_rejected_while_in_flight(builder, project_service):
    await ready_to_submit(builder)
    builder.is_submitting = True

    result = await builder.submit()

    assert result.success is False
    project_service.create_project.assert_not_called()


@pytest.mark.asyncio
async def test_failure_after_close_leaves_the_next_draft_alone(builder, project_service):
    await ready_to_submit(builder)

    async def close_then_fail(request):
        builder.close()
        await builder.open()
        builder.update_project(projectName="Next shoot")
        return ApiResult.failure("date is locked", status_code=409)

    project_service.create_project.side_effect = close_then_fail

    result = await builder.submit()

    assert result.success is False
    assert builder.is_open is True
    assert builder.draft.projectName == "Next shoot"
    assert builder.submit_error is None
    assert GlobalScope() not in builder.errors
    assert builder.is_submitting is False
    builder.on_created.assert_not_called()


@pytest.mark.asyncio
async def test_success_after_close_still_reports_the_new_project(builder, project_service, notifier):
    await ready_to_submit(builder)
    next_draft = {}

    async def close_then_succeed(request):
        builder.close()
        await builder.open()
        builder.update_project(projectName="Next shoot")
        next_draft["submitting"] = builder.is_submitting
        return ApiResult.ok({"id": "new-project-id"})

    project_service.create_project.side_effect = close_then_succeed

    result = await builder.submit()

    assert result.success is True
    assert next_draft["submitting"] is False
    assert builder.is_open is True
    assert builder.draft.projectName == "Next shoot"
    assert builder.is_submitting is False
    assert notifier.last.message == "Project created successfully"
    builder.on_created.assert_called_once_with({"id": "new-project-id"})


@pytest.mark.asyncio
async def test_cancel_resets_everything(builder):
    await ready_to_submit(builder)
    builder.set_client_enabled(True)
    builder.add_event()
    builder.validate_events()

    builder.cancel()

    assert builder.step == WizardStep.PROJECT
    assert builder.selected_index == 0
    assert len(builder.events) == 1
    assert builder.events[0].name == ""
    assert builder.draft.projectName == ""
    assert builder.errors.has_errors is False
    assert builder.client_enabled is False
    assert builder.current_member.memberId is None
    assert builder.availability.members == []


@pytest.mark.asyncio
async def test_open_loads_roles_once(builder, role_service):
    await builder.open()
    builder.close()
    await builder.open()

    role_service.client.post.assert_awaited_once_with("/roles/company", json={"companyId": "company-1"})
