"""Tests for directory listing."""
from datetime import datetime

import pytest

from pan115.core.api.endpoints import API_FILE_LIST
from pan115.core.exceptions import ListError, RemoteFileNotFoundError, SessionExpiredError
from pan115.core.files import FileEntry, FileListService


def page(records, count):
    return {'state': True, 'count': count, 'data': records}


def file_record(n):
    return {'fid': str(n), 'cid': '0', 'n': f'file{n}', 's': n, 'pc': f'pc{n}', 'sha': 'S'}


class TestFileEntry:
    """Tests for FileEntry model."""
    
    def test_file_record(self, sample_file_record):
        """Test a file record."""
        entry = FileEntry.from_record(sample_file_record)
        
        assert entry.file_id == '2001'
        assert entry.parent_id == '1000'
        assert entry.name == 'movie.mkv'
        assert entry.size == 1048576
        assert entry.pick_code == 'abc123'
        assert not entry.is_dir
        assert entry.modified == datetime.fromtimestamp(1699900000)
    
    def test_dir_record(self, sample_dir_record):
        """Test a directory record."""
        entry = FileEntry.from_record(sample_dir_record)
        
        assert entry.file_id == '1000'
        assert entry.parent_id == '0'
        assert entry.is_dir
        assert entry.size == 0
        assert entry.sha1 == ''
    
    def test_raw_kept(self, sample_file_record):
        """Test the original record is kept."""
        assert FileEntry.from_record(sample_file_record).raw == sample_file_record
    
    def test_formatted_time(self):
        """Test formatted modification time."""
        entry = FileEntry.from_record({'fid': '1', 'cid': '0', 'n': 'a', 't': '2023-11-13 10:20'})
        
        assert entry.modified == datetime(2023, 11, 13, 10, 20)
    
    def test_missing_time(self):
        """Test records without time."""
        assert FileEntry.from_record({'fid': '1', 'cid': '0'}).modified is None


class TestFileListService:
    """Tests for FileListService."""
    
    @pytest.mark.asyncio
    async def test_single_page(self, api_client, sample_file_record, sample_dir_record):
        """Test one page listing keeps server order."""
        api_client.request.return_value = page([sample_dir_record, sample_file_record], 2)
        
        entries = await FileListService(api_client).list_files('1000', 100)
        
        assert [e.name for e in entries] == ['Videos', 'movie.mkv']
        args, kwargs = api_client.request.call_args
        assert args == ('GET', API_FILE_LIST)
        assert kwargs['params']['cid'] == '1000'
        assert kwargs['params']['limit'] == 100
        assert kwargs['params']['offset'] == 0
        assert kwargs['params']['show_dir'] == 1
    
    @pytest.mark.parametrize('page_size', [0, -1, None])
    @pytest.mark.asyncio
    async def test_default_limit(self, api_client, page_size):
        """Test non-positive page size uses the provider limit."""
        api_client.request.return_value = page([], 0)
        
        await FileListService(api_client).list_files('0', page_size)
        
        assert api_client.request.call_args.kwargs['params']['limit'] == 1000
    
    @pytest.mark.asyncio
    async def test_pagination(self, api_client):
        """Test pages are fetched until count is reached."""
        api_client.request.side_effect = [
            page([file_record(1), file_record(2)], 5),
            page([file_record(3), file_record(4)], 5),
            page([file_record(5)], 5),
        ]
        
        entries = await FileListService(api_client).list_files('0', 2)
        
        assert [e.file_id for e in entries] == ['1', '2', '3', '4', '5']
        offsets = [c.kwargs['params']['offset'] for c in api_client.request.call_args_list]
        assert offsets == [0, 2, 4]
    
    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self, api_client):
        """Test a short listing stops at an empty page."""
        api_client.request.side_effect = [
            page([file_record(1)], 10),
            page([], 10),
        ]
        
        entries = await FileListService(api_client).list_files('0', 1)
        
        assert len(entries) == 1
        assert api_client.request.await_count == 2
    
    @pytest.mark.asyncio
    async def test_empty_directory(self, api_client):
        """Test an empty directory."""
        api_client.request.return_value = {'state': True, 'count': 0, 'data': []}
        
        assert await FileListService(api_client).list_files('0') == []
    
    @pytest.mark.asyncio
    async def test_application_error(self, api_client):
        """Test unmapped errors raise ListError."""
        api_client.request.return_value = {'state': False, 'errno': 1, 'error': 'bad'}
        
        with pytest.raises(ListError):
            await FileListService(api_client).list_files('0')
    
    @pytest.mark.asyncio
    async def test_missing_directory(self, api_client):
        """Test mapped errno."""
        api_client.request.return_value = {'state': False, 'errno': 20009}
        
        with pytest.raises(RemoteFileNotFoundError):
            await FileListService(api_client).list_files('404')
    
    @pytest.mark.asyncio
    async def test_expired_session(self, api_client):
        """Test expired session errno."""
        api_client.request.return_value = {'state': False, 'errno': 99}
        
        with pytest.raises(SessionExpiredError):
            await FileListService(api_client).list_files('0')
    
    @pytest.mark.asyncio
    async def test_malformed_record(self, api_client):
        """Test records without ids."""
        api_client.request.return_value = page([{'n': 'x'}], 1)
        
        with pytest.raises(ListError):
            await FileListService(api_client).list_files('0')
    
    @pytest.mark.asyncio
    async def test_transport_error_kind(self, api_client):
        """Test transport errors are requested as ListError."""
        api_client.request.side_effect = ListError('Network error: down')
        
        with pytest.raises(ListError):
            await FileListService(api_client).list_files('0')
        
        assert api_client.request.call_args.kwargs['error_cls'] is ListError
